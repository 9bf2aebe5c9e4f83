import pytest

from grpcmw.status import (
    Code,
    StatusError,
    code_of,
    default_decider,
    default_error_to_code,
)


def test_ok_string():
    code = code_of(None)
    assert str(code) == "OK"
    assert f"{code}" == "OK"


def test_named_codes():
    assert str(code_of(StatusError(Code.NOT_FOUND, "missing"))) == "NotFound"
    unauthenticated = code_of(StatusError(Code.UNAUTHENTICATED, "who"))
    assert str(unauthenticated) == "Unauthenticated"
    assert int(unauthenticated) == 16


def test_code_round_trip_through_int():
    for code in Code:
        assert Code(int(code)) is code


def test_code_strings_are_unique_and_match_format():
    codes = [code_of(StatusError(code, "x")) for code in Code]
    names = [str(code) for code in codes]
    assert len(set(names)) == len(names)
    for code in codes:
        assert format(code) == str(code)
        assert " " not in str(code)


def test_unknown_code_value_rejected():
    with pytest.raises(ValueError):
        Code(1000)


def test_code_of_none_is_ok():
    assert code_of(None) is Code.OK


def test_code_of_status_error():
    err = StatusError(Code.NOT_FOUND, "missing")
    assert code_of(err) is Code.NOT_FOUND
    assert err.message == "missing"


def test_code_of_plain_error_is_unknown():
    assert code_of(ValueError("boom")) is Code.UNKNOWN


def test_status_error_accepts_int_code():
    err = StatusError(int(Code.INTERNAL), "Userspace error.")
    assert err.code is Code.INTERNAL
    assert str(Code.INTERNAL) in str(err)
    assert "Userspace error." in str(err)


def test_status_error_is_raisable():
    with pytest.raises(StatusError) as info:
        raise StatusError(Code.ABORTED, "stop")
    assert code_of(info.value) is Code.ABORTED


def test_default_error_to_code_matches_code_of():
    for err in (None, StatusError(Code.DATA_LOSS), RuntimeError("x")):
        assert default_error_to_code(err) is code_of(err)


def test_default_decider_always_logs():
    assert default_decider("/svc/Method", None) is True
    assert default_decider("/svc/Method", RuntimeError("x")) is True