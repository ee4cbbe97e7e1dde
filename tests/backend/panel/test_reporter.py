"""Reporterのテスト"""

import logging
import threading

from backend.panel.reporter import (
    CompositeReporter,
    DispatchEvent,
    EventKind,
    ListReporter,
    LoggerReporter,
)


def make_event(message: str, kind: EventKind = EventKind.RECEIVED) -> DispatchEvent:
    return DispatchEvent(source="Pedestal.Takis", kind=kind, message=message)


class TestListReporter:
    """ListReporterのテスト"""

    def test_keeps_events_in_order(self):
        reporter = ListReporter()
        reporter.report(make_event("a"))
        reporter.report(make_event("b", EventKind.APPLIED))

        assert [e.message for e in reporter.snapshot()] == ["a", "b"]
        assert reporter.kinds() == [EventKind.RECEIVED, EventKind.APPLIED]

    def test_maxlen_keeps_newest(self):
        """上限を超えたら古いイベントから捨てられるか"""
        reporter = ListReporter(maxlen=3)
        for i in range(5):
            reporter.report(make_event(str(i)))

        assert [e.message for e in reporter.snapshot()] == ["2", "3", "4"]

    def test_snapshot_is_a_copy(self):
        """スナップショットを変更しても内部状態に影響しないか"""
        reporter = ListReporter()
        reporter.report(make_event("a"))

        snapshot = reporter.snapshot()
        snapshot.clear()

        assert len(reporter.snapshot()) == 1

    def test_concurrent_reports_are_not_lost(self):
        """複数スレッドから同時にreport()しても件数と上限が保たれるか"""
        reporter = ListReporter(maxlen=500)
        threads_count = 8
        per_thread = 200
        start = threading.Barrier(threads_count + 1)
        reading_errors: list[Exception] = []

        def produce(n: int) -> None:
            start.wait()
            for i in range(per_thread):
                reporter.report(make_event(f"{n}-{i}"))

        def consume() -> None:
            start.wait()
            try:
                for _ in range(200):
                    assert len(reporter.snapshot()) <= 500
            except Exception as e:
                reading_errors.append(e)

        threads = [
            threading.Thread(target=produce, args=(n,)) for n in range(threads_count)
        ]
        reader = threading.Thread(target=consume)
        start_all = threads + [reader]
        for t in start_all:
            t.start()
        for t in start_all:
            t.join(timeout=10.0)

        events = reporter.snapshot()
        assert len(events) == 500
        assert reading_errors == []
        assert len({e.message for e in events}) == 500


class TestLoggerReporter:
    def test_logs_with_event_level(self, caplog):
        reporter = LoggerReporter(logging.getLogger("test.reporter"))

        with caplog.at_level(logging.WARNING, logger="test.reporter"):
            reporter.report(
                DispatchEvent(
                    source="P",
                    kind=EventKind.VALUE_INVALID,
                    message="bad value",
                    level=logging.WARNING,
                )
            )

        assert "[P] value_invalid: bad value" in caplog.text


class TestCompositeReporter:
    def test_fans_out_to_all_reporters(self):
        first, second = ListReporter(), ListReporter()
        composite = CompositeReporter(first, second)

        composite.report(make_event("a"))

        assert len(first.snapshot()) == 1
        assert len(second.snapshot()) == 1
