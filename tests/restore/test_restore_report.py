from cleanops.restore.pipeline import RestoreReport, format_report
from cleanops.restore.pipeline.report import BoundedMessages


def test_bounded_messages_keep_counting_past_the_limit():
    messages = BoundedMessages(limit=2)
    for index in range(5):
        messages.add(f"problem {index}")

    assert messages.items == ["problem 0", "problem 1"]
    assert messages.total == 5
    assert len(messages) == 5


def test_report_serializes_for_json_responses():
    report = RestoreReport.empty(error_limit=3)
    report.clients.target = 3
    report.clients.restored = 2
    report.clients.errors.add("Yolanda Park: create client: constraint violation")
    report.bookings.matched = 4
    report.bookings.matched_by["email"] = 4
    report.bookings.window_conflicts.add("Xavier Stone (2025-03-04T11:30:00): skipped")
    report.customer_addresses_loaded = 7
    report.message = "done"

    payload = report.as_dict()

    assert payload["clients"] == {
        "target": 3,
        "restored": 2,
        "skipped": 0,
        "errors": ["Yolanda Park: create client: constraint violation"],
        "errorCount": 1,
    }
    assert payload["bookings"]["matchedFromBackup"] == 4
    assert payload["bookings"]["matchedBy"] == {"phone": 0, "email": 4, "name": 0}
    assert payload["bookings"]["windowConflictCount"] == 1
    assert payload["backupFiles"] == {"bookingsFound": True, "customersFound": True, "customerAddressesLoaded": 7}
    assert payload["message"] == "done"
    assert report.error_count == 1


def test_format_report_truncates_long_sections():
    report = RestoreReport.empty()
    report.bookings.restored = 12
    for index in range(8):
        report.bookings.errors.add(f"row {index} failed")

    text = format_report(report, sample_size=5)

    assert "RESTORATION COMPLETE" in text
    assert "bookings_restored  : 12" in text
    assert "Booking errors (8):" in text
    assert "  - row 4 failed" in text
    assert "row 5 failed" not in text
    assert "... 3 more" in text
    assert "Client errors" not in text
