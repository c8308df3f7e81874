"""
pytest configuration and fixtures.
"""

import pytest

from siphon.web import HTTPRequest, BufferedResponse

from .helpers import raw_request



@pytest.fixture
def make_request():
    """Factory building a parsed request."""
    def factory(uri="/", method="GET", headers=None) -> HTTPRequest:
        return HTTPRequest(raw_request(uri, method, headers), "127.0.0.1")
    return factory


@pytest.fixture
def response() -> BufferedResponse:
    return BufferedResponse()


@pytest.fixture
def template_root(tmp_path):
    """Directory with a good, a broken and a strict template."""
    (tmp_path / "page.html").write_text("<p>{{ title }}</p>")
    (tmp_path / "scalar.html").write_text("<p>{{ data }}</p>")
    (tmp_path / "broken.html").write_text("{% if %}")
    (tmp_path / "strict.html").write_text("<p>{{ user.name }}</p>")
    return tmp_path
