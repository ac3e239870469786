from contextlib import nullcontext

import pytest

from codemark.runtime import telemetry
from codemark.runtime.telemetry import Event


class RecordingLogger:
    def __init__(self, name: str) -> None:
        self.name = name
        self.records: list[tuple[str, str, dict]] = []
        self.context: dict[str, str] = {}
        self.components: list[str] = []

    def debug_with(self, message, fields) -> None:
        self.records.append(("debug", message, dict(fields)))

    def warning_with(self, message, fields) -> None:
        self.records.append(("warning", message, dict(fields)))

    def error_with(self, message, fields) -> None:
        self.records.append(("error", message, dict(fields)))

    def add_context(self, key, value) -> None:
        self.context[key] = value

    def remove_context(self, key) -> None:
        self.context.pop(key)

    def track_component(self, name):
        self.components.append(name)
        return nullcontext()

    def profile(self, name):
        return nullcontext()


@pytest.fixture
def loggers(monkeypatch) -> dict[str, RecordingLogger]:
    created: dict[str, RecordingLogger] = {}

    def fake_get_logger(name=None):
        key = name or telemetry.ROOT
        return created.setdefault(key, RecordingLogger(key))

    monkeypatch.setattr(telemetry, "get_logger", fake_get_logger)
    return created


def test_events_route_to_their_layer_logger() -> None:
    assert Event.RESCAN.logger_name == telemetry.ENGINE
    assert Event.SHADOWED_PREFIX.logger_name == telemetry.MARKERS
    assert Event.UNKNOWN_KEY.logger_name == telemetry.CONFIG


def test_record_event_writes_structured_fields(loggers) -> None:
    telemetry.record_event(Event.RESCAN, blocks=2)
    telemetry.record_event("config.unknown_key", level="warning", key="fontSize")

    assert loggers[telemetry.ENGINE].records == [
        ("debug", "event::engine.rescan", {"event": "engine.rescan", "blocks": "2"})
    ]
    level, message, fields = loggers[telemetry.CONFIG].records[0]
    assert (level, message, fields["key"]) == (
        "warning",
        "event::config.unknown_key",
        "fontSize",
    )


def test_unknown_event_names_are_rejected(loggers) -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("engine.exploded")


def test_span_pushes_context_and_reports_failures(loggers) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span(
            "engine::scan",
            logger_name=telemetry.ENGINE,
            component="scanner",
            metadata={"lines": 4},
        ) as handle:
            handle.add_metadata("blocks", 1)
            assert loggers[telemetry.ENGINE].context == {"lines": "4"}
            raise RuntimeError("boom")

    logger = loggers[telemetry.ENGINE]
    assert logger.context == {}
    assert logger.components == ["scanner"]
    assert logger.records == [
        (
            "error",
            "span::fail",
            {"span": "engine::scan", "lines": "4", "blocks": "1", "reason": "boom"},
        )
    ]


def test_unknown_preset_is_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure("verbose")
