"""Tests for derived job metrics."""

from sync_client.data.services.job_metrics import JobMetrics, derive_metrics, format_progress

from conftest import make_status

NOW = 10_000.0


class TestDeriveMetrics:
    """Test elapsed time and ETA derivation."""

    def test_eta_at_half_progress(self):
        status = make_status(status="Running", progress=50, start_time=NOW - 100)

        metrics = derive_metrics(status, NOW)

        assert metrics.elapsed_seconds == 100
        assert metrics.estimated_total_seconds == 200
        assert metrics.remaining_seconds == 100

    def test_no_eta_without_progress(self):
        metrics = derive_metrics(make_status(status="Running", progress=0, start_time=NOW - 100), NOW)

        assert metrics.elapsed_seconds == 100
        assert not metrics.has_eta
        assert metrics.estimated_total_seconds is None

    def test_no_eta_while_starting(self):
        metrics = derive_metrics(make_status(status="Starting", progress=10, start_time=NOW - 5), NOW)
        assert not metrics.has_eta

    def test_no_eta_when_completed(self):
        metrics = derive_metrics(make_status(status="Completed", progress=100, start_time=NOW - 60), NOW)
        assert not metrics.has_eta

    def test_elapsed_is_floored(self):
        metrics = derive_metrics(make_status(status="Running", start_time=NOW - 12.9), NOW)
        assert metrics.elapsed_seconds == 12

    def test_finished_job_uses_end_time(self):
        status = make_status(status="Completed", progress=100, start_time=NOW - 500, end_time=NOW - 400)
        assert derive_metrics(status, NOW).elapsed_seconds == 100

    def test_missing_start_time(self):
        assert derive_metrics(make_status(status="Running", progress=30), NOW).elapsed_seconds == 0

    def test_clock_skew_clamps_to_zero(self):
        assert derive_metrics(make_status(status="Running", start_time=NOW + 30), NOW).elapsed_seconds == 0

    def test_full_progress_has_no_remaining_time(self):
        metrics = derive_metrics(make_status(status="Running", progress=100, start_time=NOW - 40), NOW)
        assert metrics.remaining_seconds == 0


class TestFormatProgress:
    def test_running_summary_includes_eta(self):
        status = make_status(
            status="Running", progress=50, transferred=1536, total=3072, start_time=NOW - 125
        )
        text = format_progress(status, derive_metrics(status, NOW))

        assert text == "Running | 50.0% | 2 KB / 3 KB | elapsed 2m 5s | remaining 2m 5s"

    def test_summary_without_eta(self):
        status = make_status(status="Starting")
        assert "remaining" not in format_progress(status, JobMetrics(elapsed_seconds=0))
