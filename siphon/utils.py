import os
from collections.abc import Mapping
from jinja2 import Environment, FileSystemLoader, FileSystemBytecodeCache, StrictUndefined
from .config import conf as default_conf, JsonConfigParser
from .const_var import work_directory


def get_bytecode_cache(conf: JsonConfigParser = None):
    if conf is None:
        conf = default_conf
    if not conf.get("template", "use_fs_cache"):
        return None
    cache_path = os.path.join(work_directory, conf.get("template", "cache_path"))
    os.makedirs(cache_path, exist_ok=True)
    return FileSystemBytecodeCache(cache_path, "%s.cache")


def make_environment(root: str, bc_cache=None) -> Environment:
    # cache_size=0: the source is loaded from disk on every get_template
    return Environment(loader=FileSystemLoader(root), bytecode_cache=bc_cache, cache_size=0,
                       undefined=StrictUndefined, autoescape=True, enable_async=False)


def template_context(data) -> dict:
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}
