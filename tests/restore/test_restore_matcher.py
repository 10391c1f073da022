from cleanops.restore.pipeline import BookingExportRow, match_target_identity, resolve_target_match
from cleanops.restore.targets import TargetIdentity


def _row(**values):
    return BookingExportRow(line_number=2, values=values)


def test_phone_match_beats_email_match_on_another_target(targets):
    # Phone belongs to Xavier, email to Yolanda.
    row = _row(Phone="(555) 123-4567", Email="yolanda@example.com")

    match = resolve_target_match(row, targets)

    assert match.target.id == "client-x"
    assert match.channel == "phone"


def test_email_match_beats_name_match(targets):
    row = _row(Email="YOLANDA@example.com", **{"Full name": "Xavier Stone"})

    match = resolve_target_match(row, targets)

    assert match.target.id == "client-y"
    assert match.channel == "email"


def test_name_is_the_last_resort(targets):
    row = _row(**{"First name": "zed", "Last name": "QUINN"})

    match = resolve_target_match(row, targets)

    assert match.target.id == "client-z"
    assert match.channel == "name"


def test_excel_wrapped_phone_matches(targets):
    row = _row(Phone='="4085550000"')

    assert match_target_identity(row, targets).id == "client-z"


def test_empty_identifiers_never_match(targets):
    # Zed has no email and Yolanda has no phone; blanks must not pair up.
    row = _row(Phone="", Email="", **{"Full name": ""})

    assert resolve_target_match(row, targets) is None


def test_unknown_row_is_ignored(targets):
    row = _row(Phone="999-999-9999", Email="someone@else.test", **{"Full name": "Nobody"})

    assert match_target_identity(row, targets) is None


def test_first_target_in_list_order_wins_within_a_channel(targets):
    duplicate = TargetIdentity(
        id="client-x2",
        name="Xavier Stone Jr",
        email="",
        phone=targets[0].phone,
        created_at=targets[0].created_at,
    )

    match = resolve_target_match(_row(Phone="5551234567"), [*targets, duplicate])

    assert match.target.id == "client-x"
