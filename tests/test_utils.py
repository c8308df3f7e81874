import copy

from jinja2 import FileSystemBytecodeCache

from siphon.config import JsonConfigParser, base_config
from siphon.utils import get_bytecode_cache, template_context


def test_bytecode_cache_disabled():
    conf = JsonConfigParser(copy.deepcopy(base_config))
    assert get_bytecode_cache(conf) is None


def test_bytecode_cache_nested_path(tmp_path):
    conf = JsonConfigParser(copy.deepcopy(base_config))
    conf.set("template", "use_fs_cache", True)
    conf.set("template", "cache_path", str(tmp_path / "cache" / "jinja"))
    assert isinstance(get_bytecode_cache(conf), FileSystemBytecodeCache)
    assert (tmp_path / "cache" / "jinja").is_dir()
    assert isinstance(get_bytecode_cache(conf), FileSystemBytecodeCache)


def test_template_context():
    assert template_context({"a": 1}) == {"a": 1}
    assert template_context([1, 2]) == {"data": [1, 2]}
