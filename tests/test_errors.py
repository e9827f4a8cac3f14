import dataclasses
import json

import pytest

from ginweb.errors import Error, ErrorList, ErrorType


class CustomErr(Exception):
    pass


@dataclasses.dataclass
class CustomMeta:
    status: str
    data: str


def test_error_basics():
    base = ValueError("test error")
    err = Error(base, ErrorType.PRIVATE)
    assert str(err) == "test error"
    assert err.json() == {"error": "test error"}

    assert err.set_type(ErrorType.PUBLIC) is err
    assert err.type == ErrorType.PUBLIC

    assert err.set_meta("some data") is err
    assert err.meta == "some data"
    assert err.json() == {"error": "test error", "meta": "some data"}
    assert json.loads(err.marshal()) == {"error": "test error", "meta": "some data"}

    err.set_meta({"status": "200", "data": "some data"})
    assert err.json() == {"error": "test error", "status": "200", "data": "some data"}

    err.set_meta({"error": "custom error", "status": "200", "data": "some data"})
    assert err.json() == {"error": "custom error", "status": "200", "data": "some data"}

    meta = CustomMeta(status="200", data="other data")
    err.set_meta(meta)
    assert err.json() == CustomMeta(status="200", data="other data")
    assert json.loads(err.marshal()) == {"status": "200", "data": "other data"}


@pytest.fixture
def errs():
    return ErrorList(
        [
            Error(Exception("first"), ErrorType.PRIVATE),
            Error(Exception("second"), ErrorType.PRIVATE, "some data"),
            Error(Exception("third"), ErrorType.PUBLIC, {"status": "400"}),
        ]
    )


def test_error_slice(errs):
    assert errs.by_type(ErrorType.ANY) == errs
    assert str(errs.last()) == "third"
    assert errs.errors() == ["first", "second", "third"]
    assert errs.by_type(ErrorType.PUBLIC).errors() == ["third"]
    assert errs.by_type(ErrorType.PRIVATE).errors() == ["first", "second"]
    assert errs.by_type(ErrorType.PUBLIC | ErrorType.PRIVATE).errors() == ["first", "second", "third"]
    assert len(errs.by_type(ErrorType.BIND)) == 0
    assert str(errs.by_type(ErrorType.BIND)) == ""


def test_error_slice_string(errs):
    expected = (
        "Error #01: first\n"
        "Error #02: second\n"
        "     Meta: some data\n"
        "Error #03: third\n"
        "     Meta: map[status:400]\n"
    )
    assert str(errs) == expected


def test_error_slice_json(errs):
    expected = [
        {"error": "first"},
        {"error": "second", "meta": "some data"},
        {"error": "third", "status": "400"},
    ]
    assert errs.json() == expected
    assert json.loads(errs.marshal()) == expected


def test_single_error_json():
    errs = ErrorList([Error(Exception("first"), ErrorType.PRIVATE)])
    assert errs.json() == {"error": "first"}
    assert json.loads(errs.marshal()) == {"error": "first"}


def test_empty_error_list():
    errs = ErrorList()
    assert errs.last() is None
    assert errs.json() is None
    assert str(errs) == ""
    assert errs.errors() == []
    assert errs.marshal() == "null"


def test_error_unwrap():
    inner = CustomErr("some error")
    err = Error(inner, ErrorType.ANY)
    assert err.err is inner
    assert err.__cause__ is inner
    with pytest.raises(Error) as info:
        raise err
    assert isinstance(info.value.__cause__, CustomErr)


def test_is_type():
    err = Error(Exception("x"), ErrorType.BIND)
    assert err.is_type(ErrorType.BIND)
    assert err.is_type(ErrorType.ANY)
    assert not err.is_type(ErrorType.RENDER)
    assert not Error(Exception("y")).is_type(ErrorType.ANY)


def test_string_err_is_wrapped():
    err = Error("plain message")
    assert str(err) == "plain message"
    assert err.json() == {"error": "plain message"}