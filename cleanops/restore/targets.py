"""
Target identities: the allow-list of clients a restore run is scoped to.

The list is supplied by an operator as a JSON array::

    [{"id": "cmk...", "name": "P Gupta", "email": "", "phone": "4085719370",
      "createdAt": "2026-01-16 00:55:59.824"}]
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from .errors import TargetIdentityError
from .pipeline.mappers import parse_iso_datetime
from .pipeline.normalize import normalize_email, normalize_name, normalize_phone


@dataclass(frozen=True)
class TargetIdentity:
    id: str
    name: str
    email: str
    phone: str
    created_at: datetime

    @property
    def normalized_phone(self) -> str:
        return normalize_phone(self.phone)

    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)


def _parse_created_at(value: Any, *, identity_id: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        token = str(value or "").strip()
        if not token:
            raise TargetIdentityError(f"Target {identity_id} is missing createdAt.")
        try:
            parsed = parse_iso_datetime(token)
        except ValueError as exc:
            raise TargetIdentityError(f"Target {identity_id} has an invalid createdAt {token!r}.") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def target_from_mapping(payload: Mapping[str, Any]) -> TargetIdentity:
    identity_id = str(payload.get("id") or "").strip()
    name = str(payload.get("name") or "").strip()
    if not identity_id:
        raise TargetIdentityError("Target identity is missing an id.")
    if not name:
        raise TargetIdentityError(f"Target {identity_id} is missing a name.")
    return TargetIdentity(
        id=identity_id,
        name=name,
        email=str(payload.get("email") or "").strip(),
        phone=str(payload.get("phone") or "").strip(),
        created_at=_parse_created_at(payload.get("createdAt", payload.get("created_at")), identity_id=identity_id),
    )


def parse_target_identities(payload: Iterable[Mapping[str, Any]]) -> list[TargetIdentity]:
    """Build target identities, rejecting duplicate ids."""

    targets: list[TargetIdentity] = []
    seen: set[str] = set()
    for item in payload:
        if not isinstance(item, Mapping):
            raise TargetIdentityError("Each target identity must be a JSON object.")
        target = target_from_mapping(item)
        if target.id in seen:
            raise TargetIdentityError(f"Duplicate target identity id {target.id}.")
        seen.add(target.id)
        targets.append(target)
    return targets


def load_target_identities(path: str | Path) -> list[TargetIdentity]:
    """Load target identities from a JSON file."""

    file_path = Path(path)
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise TargetIdentityError(f"Target identity file not found: {file_path}") from exc
    except json.JSONDecodeError as exc:
        raise TargetIdentityError(f"Target identity file {file_path} is not valid JSON: {exc}") from exc

    if isinstance(payload, Mapping):
        payload = payload.get("targets", [])
    if not isinstance(payload, list):
        raise TargetIdentityError("Target identity file must contain a JSON array.")
    return parse_target_identities(payload)
