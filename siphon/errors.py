class ClientException(Exception):
    pass


class RequestParseError(ClientException, ValueError):
    pass


class ConfigError(Exception):
    pass
