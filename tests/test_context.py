from datetime import datetime, timedelta, timezone

from grpcmw.context import Context, background


def test_background_is_empty():
    ctx = background()
    assert ctx.value("anything") is None
    assert ctx.deadline() is None
    assert ctx.incoming_metadata() == {}


def test_with_value_does_not_mutate_parent():
    parent = background().with_value("parent", 1)
    child = parent.with_value("child", 2)
    assert child.value("parent") == 1
    assert child.value("child") == 2
    assert parent.value("child") is None
    assert background().value("parent") is None


def test_with_value_overrides_in_child_only():
    parent = background().with_value("k", "a")
    child = parent.with_value("k", "b")
    assert parent.value("k") == "a"
    assert child.value("k") == "b"


def test_deadline_keeps_earliest():
    now = datetime.now(timezone.utc)
    early = now + timedelta(seconds=1)
    late = now + timedelta(seconds=10)
    ctx = background().with_deadline(early).with_deadline(late)
    assert ctx.deadline() == early
    ctx2 = background().with_deadline(late).with_deadline(early)
    assert ctx2.deadline() == early


def test_with_timeout_sets_future_deadline():
    before = datetime.now(timezone.utc)
    ctx = background().with_timeout(2)
    after = datetime.now(timezone.utc)
    deadline = ctx.deadline()
    assert before + timedelta(seconds=2) <= deadline <= after + timedelta(seconds=2)


def test_with_timeout_accepts_timedelta():
    ctx = background().with_timeout(timedelta(seconds=5))
    assert ctx.deadline() > datetime.now(timezone.utc)


def test_incoming_metadata_lowercases_and_keeps_order():
    ctx = background().with_incoming_metadata(
        [("Authorization", "first"), ("authorization", "second"), ("x-id", "v")]
    )
    md = ctx.incoming_metadata()
    assert md["authorization"] == ("first", "second")
    assert md["x-id"] == ("v",)


def test_incoming_metadata_from_mapping():
    ctx = background().with_incoming_metadata({"Key": ["a", "b"], "other": "c"})
    assert ctx.incoming_metadata() == {"key": ("a", "b"), "other": ("c",)}


def test_incoming_metadata_returns_copy():
    ctx = background().with_incoming_metadata({"k": "v"})
    ctx.incoming_metadata()["k"] = ("changed",)
    assert ctx.incoming_metadata()["k"] == ("v",)


def test_tags_default_is_throwaway():
    ctx = background()
    ctx.tags()["a"] = 1
    assert "a" not in ctx.tags()


def test_tags_shared_with_children():
    tags = {}
    ctx = background().with_tags(tags)
    child = ctx.with_value("x", 1)
    child.tags()["custom"] = "something"
    assert ctx.tags()["custom"] == "something"
    assert tags == {"custom": "something"}


def test_context_instance_independent_of_background():
    ctx = Context().with_value("k", 1)
    assert ctx.value("k") == 1
    assert background().value("k") is None