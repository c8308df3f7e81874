import os
import copy
import json
from .errors import ConfigError
from .const_var import work_directory


base_config = {
    "server": {
        "request_timeout": 10
    },
    "http": {
        "host": "",
        "port": 8080
    },
    "logger": {
        "level": 20,
        "formatter": "$(asctime)s [$(levelname)s]:$(message)s",
        "time_format": "$Y/$m/$d $H:$M:$S",
        "console": True,
        "save_log": False,
        "save_path": "log/"
    },
    "template": {
        "template_path": "template/",
        "use_fs_cache": False,
        "cache_path": "__pycache__/"
    },
    "site": {
        "name": "site",
        "template": "index.html",
        "data": {},
        "debug": False,
        "siphon_target": None
    }
}


def dict_sync(source: dict, target: dict):
    for k, v in source.items():
        if isinstance(v, dict) and isinstance(target.get(k), dict):
            dict_sync(v, target[k])
        else:
            target[k] = v


class JsonConfigParser:
    def __init__(self, config: dict):
        self.config = config

    def update(self, path):
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        with open(path, "r") as raw:
            data = raw.read()
        try:
            loaded = json.loads(data)
        except json.decoder.JSONDecodeError as e:
            raise ConfigError(f"{path} is not valid json: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"{path} must contain a json object")
        dict_sync(loaded, self.config)

    def get(self, segment, block):
        if segment in self.config:
            result = self.config[segment]
            if block in result:
                return result[block]
            raise KeyError(f"block {block} is not exist")
        raise KeyError(f"segment {segment} is not exist")

    def set(self, segment, block, data):
        if segment in self.config:
            self.config[segment][block] = data
        else:
            raise KeyError(f"segment {segment} is not exist")


def load_config(path=None, parser=None) -> JsonConfigParser:
    """Merge ``path`` into ``parser``, writing the defaults there first if the file is missing."""
    if parser is None:
        parser = conf
    if path is None:
        path = os.path.join(work_directory, "config.json")
    if not os.path.exists(path):
        print(f"Warning: {path} not found, regenerating...")
        with open(path, "w") as f:
            f.write(
                json.dumps(base_config, indent=2)
            )
    parser.update(path)
    return parser


conf = JsonConfigParser(copy.deepcopy(base_config))
