import os
import inspect
from abc import ABC, abstractmethod
from html import escape
from typing import Callable, Optional
from jinja2 import TemplateError
from .const_var import HOME_PATH, WAT_PAGE, FORWARDED_FOR
from .logger import main_logger
from .utils import make_environment, template_context
from .web import HTTPRequest, ResponseSink, wrap_status, redirect, http_error, not_found


class BaseHandler(ABC):
    @abstractmethod
    async def handle(self, request: HTTPRequest, response: ResponseSink):
        ...


class TemplateHandler(BaseHandler):
    """Renders ``root/name`` with ``data`` on every request.

    Failures are logged; with ``debug`` the error text is answered with a 500,
    otherwise the client is sent back to ``/``.
    """

    def __init__(self, root: str, name: str, data=None, debug=False, logger=None, bc_cache=None):
        if not logger:
            logger = main_logger.get_logger()
        self.logger = logger
        self.root = root
        self.name = name
        self.data = data
        self.debug = debug
        self.env = make_environment(root, bc_cache)

    @property
    def template_path(self) -> str:
        return os.path.join(self.root, self.name)

    def fail(self, request: HTTPRequest, response: ResponseSink, message: str):
        if self.debug:
            return http_error(response, message, 500)
        return redirect(request, response, HOME_PATH, 307)

    async def handle(self, request: HTTPRequest, response: ResponseSink):
        self.logger.debug(f"dbg: {request.path}, {request.uri}, {self.template_path}")
        try:
            template = self.env.get_template(self.name)
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            self.logger.error(f"{request.path} -> err parsing {self.name}: {type(e).__name__}: {e}")
            return self.fail(request, response, f"in get_template of {self.name}: {type(e).__name__}: {e}")

        # render fully before writing so a failure can still change the status
        try:
            content = template.render(template_context(self.data))
        except Exception as e:
            self.logger.error(f"{request.path} -> err executing template {self.name}: {type(e).__name__}: {e}")
            return self.fail(request, response, f"in template.render: {type(e).__name__}: {e}")

        response.set_header("Content-Type", "text/html; charset=utf-8")
        response.write_status(200)
        response.write(content.encode())


class NotFoundHandler(BaseHandler):
    async def handle(self, request: HTTPRequest, response: ResponseSink):
        response.set_header("Content-Type", "text/html; charset=utf-8")
        response.write_status(404)
        response.write(WAT_PAGE.format(escape(request.path)).encode())


class LoggingHandler(BaseHandler):
    """Logs every request after answering it with ``handler``, ``handle_func``
    or a plain 404, in that order of preference.
    """

    def __init__(self, handler: Optional[BaseHandler] = None, name="",
                 handle_func: Optional[Callable] = None, logger=None):
        if not logger:
            logger = main_logger.get_logger()
        self.logger = logger
        self.handler = handler
        self.name = name
        self.handle_func = handle_func

    async def handle(self, request: HTTPRequest, response: ResponseSink):
        recorder = wrap_status(response)
        if self.handler is not None:
            await self.handler.handle(request, recorder)
        elif self.handle_func is not None:
            result = self.handle_func(request, recorder)
            if inspect.isawaitable(result):
                await result
        else:
            not_found(request, recorder)

        self.logger.info(f"{self.name}> @{request.header(FORWARDED_FOR)} -> {request.uri} ({recorder.status_code})")


class SiphonHandler(BaseHandler):
    """Redirects (302) every request whose raw URI is not ``target`` to ``target``."""

    def __init__(self, handler: BaseHandler, target: str):
        self.handler = handler
        self.target = target

    async def handle(self, request: HTTPRequest, response: ResponseSink):
        if request.uri != self.target:
            return redirect(request, response, self.target, 302)
        await self.handler.handle(request, response)
