from pathlib import Path
import json
import logging
import sys
import pytest


pytestmark = pytest.mark.unit


def _ensure_import():
    root = Path.cwd()
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    src = root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))


def test_metrics_collector_counts_and_times():
    _ensure_import()
    from event_dispatcher.telemetry import MetricsCollector
    m = MetricsCollector()
    m.increment("a")
    m.increment("a", 2)
    with m.time("t1"):
        pass
    snap = m.snapshot()
    assert snap["counters"]["a"] == 3
    assert snap["timings"]["t1"] >= 0
    m.reset()
    assert m.snapshot() == {"counters": {}, "timings": {}}


def test_metrics_timing_recorded_on_error():
    _ensure_import()
    from event_dispatcher.telemetry import MetricsCollector
    m = MetricsCollector()
    with pytest.raises(ValueError):
        with m.time("boom"):
            raise ValueError("x")
    assert "boom" in m.timings


def test_dispatcher_records_metrics():
    _ensure_import()
    from event_dispatcher import Event, EventDispatcher
    d = EventDispatcher()
    d.connect("foo", lambda event: True)
    d.connect("foo", lambda event: True)
    d.notify(Event(None, "foo"))
    d.notify_until(Event(None, "foo"))
    d.filter(Event(None, "bar"), 1)
    counters = d.metrics.snapshot()["counters"]
    assert counters["dispatch.notify"] == 1
    assert counters["dispatch.notify.listeners"] == 2
    assert counters["dispatch.notify_until"] == 1
    assert counters["dispatch.notify_until.processed"] == 1
    assert counters["dispatch.filter"] == 1
    assert counters["dispatch.filter.listeners"] == 0
    d.notify(Event(None, "other"))
    assert set(d.metrics.timings) == {"dispatch.notify", "dispatch.notify_until", "dispatch.filter"}


def test_metrics_can_be_disabled():
    _ensure_import()
    from event_dispatcher import DispatcherSettings, Event, EventDispatcher
    d = EventDispatcher(settings=DispatcherSettings(collect_metrics=False))
    d.connect("foo", lambda event: True)
    d.notify_until(Event(None, "foo"))
    assert d.metrics.snapshot() == {"counters": {}, "timings": {}}


def test_json_formatter_includes_event_payload():
    _ensure_import()
    from event_dispatcher.logging import _JsonFormatter
    record = logging.LogRecord("event_dispatcher.x", logging.INFO, __file__, 1, "event=%s", ("e",), None)
    record.event = "e"
    record.payload = {"event_name": "foo", "subject": object()}
    data = json.loads(_JsonFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["msg"] == "event=e"
    assert data["event"] == "e"
    assert data["payload"]["event_name"] == "foo"


def test_get_logger_namespacing():
    _ensure_import()
    from event_dispatcher.logging import get_logger
    logger = get_logger("dispatcher")
    assert logger.name == "event_dispatcher.dispatcher"
    assert get_logger().name == "event_dispatcher"
    assert len(get_logger("dispatcher").handlers) == 1


def test_log_dispatch_emits_structured_record(monkeypatch):
    _ensure_import()
    from event_dispatcher import DispatcherSettings, Event, EventDispatcher
    from event_dispatcher import logging as logging_mod
    captured = []
    monkeypatch.setattr(
        logging_mod, "log_event", lambda logger, event, payload=None: captured.append((event, payload))
    )
    d = EventDispatcher(settings=DispatcherSettings(log_dispatch=True))
    d.connect("foo", lambda event: False)
    d.notify_until(Event(None, "foo"))
    assert captured == [
        (
            "event_dispatched",
            {"event_name": "foo", "mode": "notify_until", "listeners": 1, "processed": False},
        )
    ]


def test_json_formatter_includes_dispatch_context():
    _ensure_import()
    from event_dispatcher.logging import _JsonFormatter
    record = logging.LogRecord("event_dispatcher.dispatcher", logging.DEBUG, __file__, 1, "dispatch", (), None)
    record.event_name = "foo"
    record.mode = "filter"
    record.listeners = 3
    data = json.loads(_JsonFormatter().format(record))
    assert (data["event_name"], data["mode"], data["listeners"]) == ("foo", "filter", 3)
    assert "event" not in data


def test_log_dispatch_omits_processed_outside_notify_until(monkeypatch):
    _ensure_import()
    from event_dispatcher import DispatcherSettings, Event, EventDispatcher
    from event_dispatcher import logging as logging_mod
    captured = []
    monkeypatch.setattr(
        logging_mod, "log_event", lambda logger, event, payload=None: captured.append((event, payload))
    )
    d = EventDispatcher(settings=DispatcherSettings(log_dispatch=True))
    d.connect("content", lambda event, value: value + 1)
    assert d.filter(Event(None, "content"), 1) == 2
    assert captured == [
        ("event_dispatched", {"event_name": "content", "mode": "filter", "listeners": 1})
    ]
