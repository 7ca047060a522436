from __future__ import annotations

from contextlib import contextmanager

import pytest

from gstring import GString, OutOfRangeError
from gstring.runtime import telemetry
from gstring.text import shape as shape_module


@pytest.fixture
def spans(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, dict]]:
    opened: list[tuple[str, dict]] = []

    @contextmanager
    def fake_span(name, *, component=None, metadata=None, **_):
        opened.append((name, {"component": component, **(metadata or {})}))
        yield None

    monkeypatch.setattr(telemetry, "span", fake_span)
    return opened


def test_every_mutation_opens_a_span(spans: list[tuple[str, dict]]) -> None:
    s = GString("abc")

    s.insert(1, "xy")
    s.push("z")
    s.remove(0)
    s.pop()
    s.splice((0, 1), "q")
    s.drain((0, 1))
    s.clear()

    assert [name for name, _ in spans] == [
        "gstring::insert",
        "gstring::push",
        "gstring::remove",
        "gstring::pop",
        "gstring::splice",
        "gstring::drain",
        "gstring::clear",
    ]
    assert all(meta["component"] == "gstring" for _, meta in spans)
    assert spans[0][1]["start"] == 1
    assert spans[0][1]["inserted_bytes"] == 2


def test_rejected_edits_do_not_open_spans(spans: list[tuple[str, dict]]) -> None:
    s = GString("abc")

    with pytest.raises(OutOfRangeError):
        s.insert(4, "x")
    assert s.pop() is not None
    GString().clear()
    assert GString().pop() is None

    assert [name for name, _ in spans] == ["gstring::pop"]


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GSTRING_SOME_FLAG", "yes")
    monkeypatch.setenv("GSTRING_SOME_INT", "12")
    monkeypatch.setenv("GSTRING_BAD_INT", "twelve")
    monkeypatch.delenv("GSTRING_MISSING", raising=False)

    assert telemetry.env_flag("SOME_FLAG", False) is True
    assert telemetry.env_flag("MISSING", True) is True
    assert telemetry.env_int("SOME_INT", 4) == 12
    assert telemetry.env_int("MISSING", 4) == 4
    with pytest.raises(ValueError):
        telemetry.env_int("BAD_INT", 4)


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


class RecordingLogger:
    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.context: dict[str, str] = {}

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    @contextmanager
    def track_component(self, name: str):
        self.calls.append(("component", name))
        yield

    @contextmanager
    def profile(self, name: str):
        self.calls.append(("profile", name))
        yield

    def error_with(self, message: str, pairs: list[tuple[str, str]]) -> None:
        self.calls.append(("error", message, dict(pairs)))

    def debug_with(self, message: str, pairs: list[tuple[str, str]]) -> None:
        self.calls.append(("debug", message, dict(pairs)))

    def info(self, message: str) -> None:
        self.calls.append(("info", message))


@pytest.fixture
def recording_logger(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    log = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: log)
    return log


def test_span_attaches_and_clears_context(recording_logger: RecordingLogger) -> None:
    with telemetry.span("gstring::insert", component="gstring", metadata={"start": 2}):
        assert recording_logger.context == {"start": "2"}

    assert recording_logger.context == {}
    assert recording_logger.calls == [
        ("component", "gstring"),
        ("profile", "gstring::insert"),
    ]


def test_span_logs_failure_and_reraises(recording_logger: RecordingLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.span("gstring::splice", component="gstring", metadata={"end": 5}):
            raise KeyError("boom")

    assert recording_logger.context == {}
    kind, message, payload = recording_logger.calls[-1]
    assert (kind, message) == ("error", "span::fail")
    assert payload["span"] == "gstring::splice"
    assert payload["component"] == "gstring"
    assert payload["end"] == "5"
    assert "boom" in payload["reason"]


def test_failed_edit_leaves_string_untouched(
    recording_logger: RecordingLogger, monkeypatch: pytest.MonkeyPatch
) -> None:
    s = GString("abc")

    def explode(*args, **kwargs):
        raise RuntimeError("segmenter down")

    monkeypatch.setattr(shape_module.Shape, "resegment", explode)
    with pytest.raises(RuntimeError):
        s.insert(1, "x")

    assert s == "abc"
    assert s.version == 0
    assert recording_logger.calls[-1][1] == "span::fail"
    assert recording_logger.context == {}


def test_record_event_uses_structured_or_plain_method(
    recording_logger: RecordingLogger,
) -> None:
    telemetry.record_event("resegment.grow", level="debug", data={"context": 8})
    telemetry.record_event("loaded", level="info")

    assert recording_logger.calls[0] == (
        "debug",
        "event::resegment.grow",
        {"event": "resegment.grow", "context": "8"},
    )
    assert recording_logger.calls[1][0] == "info"
    assert recording_logger.calls[1][1].startswith("event::loaded")
    with pytest.raises(ValueError):
        telemetry.record_event("x", level="verbose")


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        telemetry.configure(preset="benchmark")
