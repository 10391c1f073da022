"""Prometheus metrics helpers for the backup restore."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from prometheus_client import Counter

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline.report import RestoreReport

_restore_runs = Counter(
    "restore_runs_total",
    "Backup restore runs by outcome.",
    ["outcome"],
)
_restore_entities = Counter(
    "restore_entities_total",
    "Entities handled by the backup restore, by category and outcome.",
    ["category", "outcome"],
)
_restore_matches = Counter(
    "restore_booking_matches_total",
    "Booking rows matched to a target identity, by identifier channel.",
    ["channel"],
)


def record_restore_run(outcome: Literal["completed", "connection_failed", "failed"]) -> None:
    """Increment the restore run counter."""

    _restore_runs.labels(outcome=outcome).inc()


def record_restore_report(report: "RestoreReport") -> None:
    """Fold a finished report into the entity counters."""

    entity_counts = {
        ("clients", "restored"): report.clients.restored,
        ("clients", "skipped"): report.clients.skipped,
        ("clients", "error"): report.clients.errors.total,
        ("addresses", "restored"): report.addresses.restored,
        ("addresses", "reused"): report.addresses.reused,
        ("addresses", "error"): report.addresses.errors.total,
        ("bookings", "restored"): report.bookings.restored,
        ("bookings", "skipped"): report.bookings.skipped,
        ("bookings", "error"): report.bookings.errors.total,
    }
    for (category, outcome), count in entity_counts.items():
        if count:
            _restore_entities.labels(category=category, outcome=outcome).inc(count)
    for channel, count in report.bookings.matched_by.items():
        if count:
            _restore_matches.labels(channel=channel).inc(count)
    record_restore_run("completed")
