"""Derived metrics for transfer-job snapshots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from sync_client.data.models import JobState, JobStatus
from sync_client.utils.formatting import format_bytes, format_duration


@dataclass(frozen=True)
class JobMetrics:
    """Elapsed time and, for running jobs with progress, an ETA."""

    elapsed_seconds: int
    estimated_total_seconds: Optional[float] = None
    remaining_seconds: Optional[float] = None

    @property
    def has_eta(self) -> bool:
        return self.remaining_seconds is not None


def derive_metrics(status: JobStatus, now: float) -> JobMetrics:
    """
    Compute metrics for ``status`` at wall-clock time ``now``.

    A finished job with a recorded end time measures elapsed time up to that
    end time. An ETA is only produced for running jobs with non-zero progress.
    """
    if status.start_time is None:
        elapsed = 0
    else:
        until = status.end_time if status.is_terminal and status.end_time is not None else now
        elapsed = max(0, int(math.floor(until - status.start_time)))

    if status.state != JobState.RUNNING or status.progress_percent <= 0:
        return JobMetrics(elapsed_seconds=elapsed)

    estimated_total = elapsed / (status.progress_percent / 100)
    remaining = max(0.0, estimated_total - elapsed)
    return JobMetrics(
        elapsed_seconds=elapsed,
        estimated_total_seconds=estimated_total,
        remaining_seconds=remaining,
    )


def format_progress(status: JobStatus, metrics: JobMetrics) -> str:
    """One-line progress summary of a job."""
    parts = [
        f"{status.status_label or status.state.value}",
        f"{status.progress_percent:.1f}%",
        f"{format_bytes(status.transferred_bytes)} / {format_bytes(status.total_bytes)}",
        f"elapsed {format_duration(metrics.elapsed_seconds)}",
    ]
    if metrics.has_eta:
        parts.append(f"remaining {format_duration(metrics.remaining_seconds)}")
    return " | ".join(parts)
