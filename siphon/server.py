import sys
import time
import asyncio
from .config import conf
from .const_var import PAGE_400, PAGE_500
from .errors import ClientException
from .logger import main_logger
from .web import HTTPRequest, BufferedResponse, http_error


class FullAsyncServer(object):
    """Serves one request per connection through ``handler``."""

    def __init__(self, handler, logger=None, timeout=None, limit=2 ** 16):
        if not logger:
            logger = main_logger.get_logger()
        if timeout is None:
            timeout = conf.get("server", "request_timeout")
        self.log = logger
        self.handler = handler
        self.timeout = timeout
        self.limit = limit
        self.listener = None

    def millis(self):
        return int(time.time() * 1000)

    async def read_request(self, reader: asyncio.StreamReader, ip) -> HTTPRequest:
        header = await asyncio.wait_for(reader.readuntil(b"\r\n\r\n"), self.timeout)
        req = HTTPRequest(header, ip)
        if req.content_length:
            req.body = await asyncio.wait_for(reader.readexactly(req.content_length), self.timeout)
        return req

    async def dispatch(self, req: HTTPRequest) -> BufferedResponse:
        res = BufferedResponse(logger=self.log)
        try:
            await self.handler.handle(req, res)
        except Exception:
            self.log.exception("Handler raise an error:")
            res = BufferedResponse(logger=self.log)
            http_error(res, PAGE_500, 500)
        return res

    async def server(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        peer = writer.get_extra_info("peername") or ("0.0.0.0", 0)
        ip, port = peer[0:2]
        try:
            start_time = self.millis()
            try:
                req = await self.read_request(reader, ip)
            except (ConnectionError, asyncio.TimeoutError, asyncio.IncompleteReadError,
                    asyncio.LimitOverrunError) as e:
                self.log.debug(f"[{ip}:{port}]: connect lost ({type(e).__name__})")
                return
            except ClientException as e:
                self.log.warning(f"Request Unpack Error(from {ip}): {e}")
                res = BufferedResponse(logger=self.log)
                http_error(res, PAGE_400, 400)
                await res.send(writer)
                return
            res = await self.dispatch(req)
            await res.send(writer, head_only=req.method == "HEAD")
            self.log.debug(f"{req.method} {req.uri}:{res.code} {ip}({self.millis() - start_time}ms)")
        finally:
            writer.close()

    async def start(self, host=None, port=None):
        if host is None:
            host = conf.get("http", "host")
        if port is None:
            port = conf.get("http", "port")
        self.listener = await asyncio.start_server(self.server, host or None, port, limit=self.limit)
        return self.listener

    async def serve_forever(self, host=None, port=None):
        server = await self.start(host, port)
        loop = asyncio.get_running_loop()
        stop = loop.create_future()
        if sys.platform != "win32":
            from signal import SIGTERM, SIGINT
            for sig in (SIGTERM, SIGINT):
                loop.add_signal_handler(sig, self.signal_handler, sig, stop)
        for sock in server.sockets:
            self.log.info("HTTP is running at %s:%s" % sock.getsockname()[0:2])
        self.log.info("Press Ctrl+C to stop server")
        async with server:
            await stop
        self.log.warning("Server closed")

    def signal_handler(self, sig, stop: asyncio.Future):
        self.log.warning(f"Got signal {sig}, stopping...")
        if not stop.done():
            stop.set_result(sig)

    def run(self, host=None, port=None):
        try:
            asyncio.run(self.serve_forever(host, port))
        except KeyboardInterrupt:
            self.log.warning("Server closed")
