from .web import HTTPRequest, ResponseSink, BufferedResponse, StatusRecorder, wrap_status, redirect, http_error, not_found
from .handle import BaseHandler, TemplateHandler, NotFoundHandler, LoggingHandler, SiphonHandler
from .server import FullAsyncServer
from .app import build_handler

__all__ = [
    "HTTPRequest", "ResponseSink", "BufferedResponse", "StatusRecorder", "wrap_status",
    "redirect", "http_error", "not_found",
    "BaseHandler", "TemplateHandler", "NotFoundHandler", "LoggingHandler", "SiphonHandler",
    "FullAsyncServer", "build_handler",
]
