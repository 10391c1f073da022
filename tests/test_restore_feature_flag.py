from pathlib import Path

from flask import Flask

from cleanops.restore import RESTORE_EXTENSION_KEY, init_restore


def build_app(enabled=False, **config):
    app = Flask(__name__)
    app.config.update(SECRET_KEY="test-secret", TESTING=True, RESTORE_ENABLED=enabled, **config)
    init_restore(app)
    return app


def test_restore_disabled_registers_stub_cli():
    app = build_app(enabled=False)

    assert app.extensions[RESTORE_EXTENSION_KEY]["enabled"] is False

    runner = app.test_cli_runner()
    result = runner.invoke(args=["restore"])
    assert result.exit_code != 0
    assert "Restore commands are unavailable" in result.output


def test_restore_enabled_records_resolved_paths(tmp_path):
    bookings = tmp_path / "bookings.csv"
    bookings.write_text("Phone\n", encoding="utf-8")

    app = build_app(enabled=True, RESTORE_BOOKINGS_CSV=str(bookings), RESTORE_CUSTOMERS_CSV="backups/customers.csv")

    state = app.extensions[RESTORE_EXTENSION_KEY]
    assert state["enabled"] is True
    assert state["bookings_path"] == bookings
    assert state["customers_path"] == Path(app.root_path) / "backups/customers.csv"
    assert "restore" in app.cli.commands


def test_reinitializing_replaces_cli_group():
    app = build_app(enabled=True)
    app.config["RESTORE_ENABLED"] = False
    init_restore(app)

    result = app.test_cli_runner().invoke(args=["restore"])
    assert "Restore commands are unavailable" in result.output
