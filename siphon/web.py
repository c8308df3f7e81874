import re
import asyncio
from abc import ABC, abstractmethod
from html import escape
from typing import Optional
from urllib.parse import unquote, urlsplit
from .const_var import code_message, NOT_FOUND_TEXT
from .errors import RequestParseError
from .logger import main_logger

request_line = re.compile(r"([A-Z]{3,7}) (\S+) HTTP/(\d\.\d)")


async def conn_drain(drain) -> bool:
    try:
        await drain()
    except ConnectionError:
        return True
    return False


class HTTPRequest:
    def __init__(self, origin: bytes, ip="0.0.0.0"):
        self.remote = ip
        self.head = {}
        head, _, self.body = origin.partition(b"\r\n\r\n")
        info, *extra = head.decode("latin-1").split("\r\n")
        matched = request_line.fullmatch(info)
        if not matched:
            raise RequestParseError(f"malformed request line: {info!r}")
        self.method, self.uri, self.protocol = matched.groups()
        for kv in extra:
            if not kv:
                continue
            try:
                k, v = kv.split(":", 1)
            except ValueError:
                raise RequestParseError(f"malformed header line: {kv!r}") from None
            self.head[k.strip().title()] = v.strip()

    @property
    def path(self) -> str:
        return unquote(urlsplit(self.uri).path)

    @property
    def query(self) -> str:
        return urlsplit(self.uri).query

    @property
    def content_length(self) -> int:
        try:
            return max(int(self.head.get("Content-Length", 0)), 0)
        except ValueError:
            raise RequestParseError("Content-Length is not a number") from None

    def header(self, name: str) -> str:
        return self.head.get(name.title(), "")

    def __repr__(self) -> str:
        return 'Request(method="{0}", uri="{1}", protocol="{2}")'.format(self.method, self.uri, self.protocol)


class ResponseSink(ABC):
    """Receives the status, headers and body of a single response."""

    @abstractmethod
    def set_header(self, name: str, value):
        ...

    @abstractmethod
    def write(self, data: bytes) -> int:
        ...

    @abstractmethod
    def write_status(self, code: int):
        ...

    @property
    def status_recorder(self) -> Optional["StatusRecorder"]:
        """The recorder observing this sink's status, if it is one."""
        return None


class BufferedResponse(ResponseSink):
    """Collects a whole response in memory so it can be built and sent at once.

    The first ``write_status`` (or ``write``, which implies 200) commits the
    status line and headers; status and header changes after that are dropped.
    """

    def __init__(self, protocol="HTTP/1.1", logger=None):
        if not logger:
            logger = main_logger.get_logger()
        self.logger = logger
        self.code = 200
        self.protocol = protocol
        self.header = {}
        self.content = bytearray()
        self.header_written = False

    def set_header(self, name: str, value):
        if self.header_written:
            return
        self.header[name] = value

    def write(self, data: bytes) -> int:
        if not self.header_written:
            self.write_status(200)
        if isinstance(data, str):
            data = data.encode()
        self.content += data
        return len(data)

    def write_status(self, code: int):
        if self.header_written:
            self.logger.warning(f"superfluous write_status call ({self.code} already sent, got {code})")
            return
        self.code = code
        self.header_written = True

    def getLen(self) -> int:
        return len(self.content)

    def build(self) -> bytearray:
        header = bytearray()
        header += f"{self.protocol} {self.code} {code_message.get(self.code, 'Unknown')}\r\n".encode()
        fields = {**self.header, "Content-Length": self.getLen(), "Connection": "close"}
        for k, v in fields.items():
            header += k.encode()
            header += b": "
            if isinstance(v, (bytes, bytearray)):
                header += v
            elif isinstance(v, (str, int, float)):
                header += str(v).encode()
            else:
                raise ValueError(f"Str, Bytes, int data only, but {type(v)} got")
            header += b"\r\n"
        header += b"\r\n"
        return header

    async def send(self, writer: asyncio.StreamWriter, head_only=False):
        writer.write(self.build())
        if await conn_drain(writer.drain) or head_only:
            return
        writer.write(bytes(self.content))
        await conn_drain(writer.drain)

    def __repr__(self):
        return f"<BufferedResponse code={self.code} header={self.header}>"


class StatusRecorder(ResponseSink):
    """Forwards everything to ``sink`` and remembers the last status written."""

    def __init__(self, sink: ResponseSink):
        self.sink = sink
        # servers that never call write_status answer 200
        self.status = 200

    @property
    def status_recorder(self) -> "StatusRecorder":
        return self

    @property
    def status_code(self) -> int:
        return self.status

    def set_header(self, name: str, value):
        self.sink.set_header(name, value)

    def write(self, data: bytes) -> int:
        return self.sink.write(data)

    def write_status(self, code: int):
        self.status = code
        self.sink.write_status(code)


def wrap_status(sink: ResponseSink) -> StatusRecorder:
    recorder = sink.status_recorder
    if recorder is not None:
        return recorder
    return StatusRecorder(sink)


def redirect(request: HTTPRequest, response: ResponseSink, url: str, code: int):
    response.set_header("Location", url)
    if request.method == "GET":
        response.set_header("Content-Type", "text/html; charset=utf-8")
    response.write_status(code)
    if request.method == "GET":
        response.write(f'<a href="{escape(url)}">{code_message.get(code, "Redirect")}</a>.\n'.encode())


def http_error(response: ResponseSink, message: str, code: int):
    response.set_header("Content-Type", "text/plain; charset=utf-8")
    response.set_header("X-Content-Type-Options", "nosniff")
    response.write_status(code)
    response.write(f"{message}\n".encode())


def not_found(request: HTTPRequest, response: ResponseSink):
    http_error(response, NOT_FOUND_TEXT, 404)
