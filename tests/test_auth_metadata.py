import pytest

from grpcmw.auth.metadata import auth_from_md
from grpcmw.context import background
from grpcmw.status import Code, StatusError


@pytest.mark.parametrize(
    "pairs, expected",
    [
        ([("authorization", "bearer token")], "token"),
        ([("authorization", "Bearer token")], "token"),
        ([("authorization", "Bearer placeholder secret token")], "placeholder secret token"),
    ],
)
def test_extracts_bearer_credentials(pairs, expected):
    ctx = background().with_incoming_metadata(pairs)
    assert auth_from_md(ctx, "bearer") == expected


@pytest.mark.parametrize(
    "pairs",
    [
        [("authorization", "Basic secret")],
        [("authorization", "Basic secret"), ("authorization", "bearer token")],
        [("authorization", "")],
        [("authorization", "Bearer")],
    ],
)
def test_rejects_bad_headers(pairs):
    ctx = background().with_incoming_metadata(pairs)
    with pytest.raises(StatusError) as excinfo:
        auth_from_md(ctx, "bearer")
    assert excinfo.value.code == Code.UNAUTHENTICATED


def test_missing_header_message_names_scheme():
    with pytest.raises(StatusError) as excinfo:
        auth_from_md(background(), "bearer")
    assert excinfo.value.message == "Request unauthenticated with bearer"


def test_header_without_credentials_is_bad_string():
    ctx = background().with_incoming_metadata({"authorization": "Bearer"})
    with pytest.raises(StatusError) as excinfo:
        auth_from_md(ctx, "bearer")
    assert excinfo.value.message == "Bad authorization string"


def test_header_key_is_case_insensitive():
    ctx = background().with_incoming_metadata({"Authorization": "BEARER token"})
    assert auth_from_md(ctx, "bearer") == "token"