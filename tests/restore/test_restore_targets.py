import json
from datetime import datetime

import pytest

from cleanops.restore.errors import TargetIdentityError
from cleanops.restore.targets import load_target_identities, parse_target_identities


def test_load_targets_from_array(tmp_path, target_payload):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps(target_payload), encoding="utf-8")

    targets = load_target_identities(path)

    assert [target.id for target in targets] == ["client-x", "client-y", "client-z"]
    assert targets[0].created_at == datetime(2026, 1, 16, 0, 55, 59, 824000)
    assert targets[1].created_at == datetime(2026, 1, 16, 1, 10)
    assert targets[1].created_at.tzinfo is None
    assert targets[2].normalized_phone == "4085550000"
    assert targets[2].normalized_email == ""


def test_load_targets_from_wrapped_object(tmp_path, target_payload):
    path = tmp_path / "targets.json"
    path.write_text(json.dumps({"targets": target_payload[:1]}), encoding="utf-8")

    assert [target.name for target in load_target_identities(path)] == ["Xavier Stone"]


def test_duplicate_ids_are_rejected(target_payload):
    with pytest.raises(TargetIdentityError, match="Duplicate"):
        parse_target_identities([target_payload[0], target_payload[0]])


@pytest.mark.parametrize(
    "created_at, expected",
    [
        ("2026-01-13 02:53:12.06", datetime(2026, 1, 13, 2, 53, 12, 60000)),
        ("2026-01-07 02:14:20.5", datetime(2026, 1, 7, 2, 14, 20, 500000)),
    ],
)
def test_short_fractional_seconds_are_accepted(target_payload, created_at, expected):
    [target] = parse_target_identities([{**target_payload[0], "createdAt": created_at}])

    assert target.created_at == expected


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"name": "No Id", "createdAt": "2026-01-01"}, "missing an id"),
        ({"id": "a", "createdAt": "2026-01-01"}, "missing a name"),
        ({"id": "a", "name": "A"}, "missing createdAt"),
        ({"id": "a", "name": "A", "createdAt": "yesterday"}, "invalid createdAt"),
    ],
)
def test_invalid_entries_are_rejected(payload, message):
    with pytest.raises(TargetIdentityError, match=message):
        parse_target_identities([payload])


def test_missing_or_malformed_files(tmp_path):
    with pytest.raises(TargetIdentityError, match="not found"):
        load_target_identities(tmp_path / "absent.json")

    broken = tmp_path / "broken.json"
    broken.write_text("[{", encoding="utf-8")
    with pytest.raises(TargetIdentityError, match="not valid JSON"):
        load_target_identities(broken)

    scalar = tmp_path / "scalar.json"
    scalar.write_text("42", encoding="utf-8")
    with pytest.raises(TargetIdentityError, match="JSON array"):
        load_target_identities(scalar)
