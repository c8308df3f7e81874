from .config import conf as default_conf, JsonConfigParser
from .handle import BaseHandler, TemplateHandler, SiphonHandler, LoggingHandler
from .utils import get_bytecode_cache


def build_handler(conf: JsonConfigParser = None, logger=None) -> BaseHandler:
    """Template page, optionally behind a siphon, always behind a request log."""
    if conf is None:
        conf = default_conf
    handler = TemplateHandler(
        root=conf.get("template", "template_path"),
        name=conf.get("site", "template"),
        data=conf.get("site", "data"),
        debug=conf.get("site", "debug"),
        logger=logger,
        bc_cache=get_bytecode_cache(conf),
    )
    target = conf.get("site", "siphon_target")
    if target:
        handler = SiphonHandler(handler, target)
    return LoggingHandler(handler, name=conf.get("site", "name"), logger=logger)
