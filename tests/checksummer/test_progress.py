"""Tests for progress reporting."""

import logging
import threading

import pytest

from filechecksum.checksummer.progress import (
    ProgressReporter, ProgressState, format_rate, format_time
)


class TestProgressState:
    def test_fraction(self):
        assert ProgressState(bytes_done=25, bytes_total=100).fraction == 0.25
        assert ProgressState(bytes_done=25, bytes_total=100).percentage == 25.0

    def test_unknown_total(self):
        assert ProgressState(bytes_done=10, bytes_total=0).fraction == 0.0

    def test_overshoot_is_capped(self):
        assert ProgressState(bytes_done=150, bytes_total=100).fraction == 1.0


class TestProgressReporter:
    """Tests for ProgressReporter class."""

    def test_initialization(self):
        reporter = ProgressReporter(bytes_total=1000, log_interval_percent=5)

        assert reporter.bytes_total == 1000
        assert reporter.bytes_done == 0
        assert reporter.log_interval_percent == 5

    def test_publish_and_snapshot(self):
        reporter = ProgressReporter(bytes_total=100)

        reporter.publish(40)

        assert reporter.snapshot() == ProgressState(bytes_done=40, bytes_total=100)

    def test_publish_rejects_decrease(self):
        reporter = ProgressReporter(bytes_total=100)
        reporter.publish(50)

        with pytest.raises(ValueError):
            reporter.publish(49)

    def test_reset_starts_new_run(self):
        reporter = ProgressReporter(bytes_total=100)
        reporter.publish(100)

        reporter.reset(10)

        assert reporter.snapshot() == ProgressState(bytes_done=0, bytes_total=10)

    def test_reset_rejects_negative_total(self):
        with pytest.raises(ValueError):
            ProgressReporter(bytes_total=-1)

    def test_rejects_non_positive_log_interval(self):
        with pytest.raises(ValueError):
            ProgressReporter(log_interval_percent=0)

    def test_subscribers_called_in_order(self):
        reporter = ProgressReporter(bytes_total=30)
        seen = []
        reporter.subscribe(lambda state: seen.append(state.bytes_done))

        for done in (10, 20, 30):
            reporter.publish(done)

        assert seen == [10, 20, 30]

    def test_subscribe_during_publish(self):
        reporter = ProgressReporter(bytes_total=20)
        late = []

        def add_late_subscriber(state):
            if state.bytes_done == 10:
                reporter.subscribe(lambda s: late.append(s.bytes_done))

        reporter.subscribe(add_late_subscriber)
        reporter.publish(10)
        reporter.publish(20)

        # Joins from the next publish on
        assert late == [20]

    def test_subscribe_from_other_thread(self):
        reporter = ProgressReporter(bytes_total=10_000)
        counts = []

        def subscribe_many():
            for _ in range(200):
                reporter.subscribe(lambda state: None)

        subscriber = threading.Thread(target=subscribe_many)
        subscriber.start()
        for done in range(0, 10_001, 100):
            reporter.publish(done)
            counts.append(done)
        subscriber.join()

        assert counts[-1] == 10_000
        assert len(reporter._callbacks) == 200

    def test_get_progress(self):
        reporter = ProgressReporter(bytes_total=100)
        reporter.publish(50)

        progress = reporter.get_progress()

        assert progress["bytes_done"] == 50
        assert progress["remaining_bytes"] == 50
        assert progress["percentage"] == 50.0
        assert progress["elapsed_seconds"] >= 0

    def test_logs_at_intervals(self, caplog):
        reporter = ProgressReporter(bytes_total=100, log_interval_percent=25)

        with caplog.at_level(logging.INFO, logger="filechecksum.checksummer.progress"):
            for done in range(10, 101, 10):
                reporter.publish(done)

        progress_lines = [r for r in caplog.records if r.getMessage().startswith("Progress:")]
        assert len(progress_lines) == 4

    def test_snapshot_from_other_thread(self):
        reporter = ProgressReporter(bytes_total=1_000)
        snapshots = []

        def poll():
            for _ in range(100):
                snapshots.append(reporter.snapshot().bytes_done)

        poller = threading.Thread(target=poll)
        poller.start()
        for done in range(0, 1_001, 10):
            reporter.publish(done)
        poller.join()

        assert snapshots == sorted(snapshots)


class TestFormatting:
    def test_format_time(self):
        assert format_time(0) == "0s"
        assert format_time(3725) == "1h 2m 5s"
        assert format_time(60) == "1m"

    def test_format_rate(self):
        assert format_rate(512) == "512.0 B/s"
        assert format_rate(2 * 1024 * 1024) == "2.0 MiB/s"
