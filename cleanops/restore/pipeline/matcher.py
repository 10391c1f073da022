"""
Multi-channel matching of export rows against the target identity list.

Export rows share no key with the live system, so a row is resolved by
comparing normalized identifiers. Channels are tried strongest first and each
channel is evaluated across every target before the next one is considered:
a phone hit on any target beats an email hit on an earlier one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from ..targets import TargetIdentity
from .normalize import normalize_email, normalize_name, normalize_phone
from .rows import BookingExportRow

MatchChannel = Literal["phone", "email", "name"]
MATCH_CHANNELS: tuple[MatchChannel, ...] = ("phone", "email", "name")


@dataclass(frozen=True)
class TargetMatch:
    """A source row resolved to a target identity."""

    row: BookingExportRow
    target: TargetIdentity
    channel: MatchChannel


def _row_keys(row: BookingExportRow) -> dict[MatchChannel, str]:
    return {
        "phone": normalize_phone(row.phone),
        "email": normalize_email(row.email),
        "name": normalize_name(row.full_name),
    }


def _target_key(target: TargetIdentity, channel: MatchChannel) -> str:
    if channel == "phone":
        return target.normalized_phone
    if channel == "email":
        return target.normalized_email
    return target.normalized_name


def resolve_target_match(row: BookingExportRow, targets: Sequence[TargetIdentity]) -> TargetMatch | None:
    """Resolve ``row`` to a target, reporting the channel that matched."""

    row_keys = _row_keys(row)
    for channel in MATCH_CHANNELS:
        row_key = row_keys[channel]
        if not row_key:
            continue
        for target in targets:
            if _target_key(target, channel) == row_key:
                return TargetMatch(row=row, target=target, channel=channel)
    return None


def match_target_identity(row: BookingExportRow, targets: Sequence[TargetIdentity]) -> TargetIdentity | None:
    match = resolve_target_match(row, targets)
    return match.target if match else None
