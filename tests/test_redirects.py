import http
import re

import pytest

from ginweb.redirects import redirect_code, safe_prefix, trailing_slash_redirect_path


def test_redirect_code_get_is_permanent():
    assert redirect_code("GET") == http.HTTPStatus.MOVED_PERMANENTLY


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"])
def test_redirect_code_other_methods_are_temporary(method):
    assert redirect_code(method) == http.HTTPStatus.TEMPORARY_REDIRECT


def test_safe_prefix_empty_means_no_prefix():
    assert safe_prefix("") is None


def test_safe_prefix_keeps_clean_value():
    assert safe_prefix("/api") == "/api"


def test_safe_prefix_collapses_slashes_left_by_removed_chars():
    assert safe_prefix("/a/%/b") == "/a/b"


@pytest.mark.parametrize("value", ["/x<script>", "/a b/c", "/p?q=1&r", "/ok-path/../z"])
def test_safe_prefix_only_safe_characters(value):
    result = safe_prefix(value)
    assert result is not None
    assert re.fullmatch(r"[a-zA-Z0-9/-]*", result)
    assert "//" not in result


@pytest.mark.parametrize("path", ["/foo", "/a/b", "/users/1"])
def test_adds_trailing_slash(path):
    assert trailing_slash_redirect_path(path) == path + "/"


@pytest.mark.parametrize("path", ["/foo/", "/a/b/"])
def test_removes_trailing_slash(path):
    assert trailing_slash_redirect_path(path) == path[:-1]


def test_root_gets_no_slash_removed():
    assert trailing_slash_redirect_path("/") == "//"


@pytest.mark.parametrize("path", ["/foo", "/foo/", "/a/b"])
def test_round_trip_toggles_back(path):
    once = trailing_slash_redirect_path(path)
    assert trailing_slash_redirect_path(once) == path


def test_prefix_is_prepended():
    result = trailing_slash_redirect_path("/foo", "/api")
    assert result.startswith("/api/")
    assert result.endswith("/foo/")


def test_prefix_is_sanitised():
    result = trailing_slash_redirect_path("/foo/", "/api<x>")
    assert result.startswith(safe_prefix("/api<x>") + "/")
    assert "<" not in result
    assert not result.endswith("/")