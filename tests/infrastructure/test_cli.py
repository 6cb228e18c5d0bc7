"""End-to-end tests of the command-line adapter, on a temporary data dir."""

from __future__ import annotations

import re

import pytest
from click.testing import CliRunner

from pizzeria.infrastructure.cli.main import cli

_CODE = re.compile(r"Order (ORD-[0-9A-F]{8}) created")


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("PIZZERIA_DATA_DIR", str(tmp_path))
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, list(args))

    return invoke


def _create(run, name: str = "Mario Rossi") -> str:
    result = run(
        "customer", "create",
        "--name", name,
        "--phone", "+393331234567",
        "--address", "Via Roma 1, Napoli",
        "--items", "Margherita:2:7.50,Diavola:1:9.00",
    )
    assert result.exit_code == 0, result.output
    return _CODE.search(result.output).group(1)


class TestCustomerCommands:

    def test_create_and_show(self, run):
        code = _create(run)
        result = run("customer", "show", "--code", code)
        assert result.exit_code == 0
        assert "status=PENDING" in result.output
        assert "Diavola" in result.output
        assert "â¬24.00" in result.output

    def test_show_unknown(self, run):
        result = run("customer", "show", "--code", "ORD-NOPE")
        assert result.exit_code == 1
        assert "no such order" in result.output

    def test_create_with_bad_item_format(self, run):
        result = run(
            "customer", "create", "--name", "Mario", "--phone", "3331234567",
            "--address", "Via Roma 1", "--items", "Margherita",
        )
        assert result.exit_code == 2
        assert "Pizza:Quantity:UnitPrice" in result.output

    def test_create_with_bad_phone(self, run):
        result = run(
            "customer", "create", "--name", "Mario", "--phone", "nope",
            "--address", "Via Roma 1", "--items", "Margherita:1:7.50",
        )
        assert result.exit_code == 1
        assert "malformed input" in result.output

    def test_create_with_infinite_price(self, run):
        result = run(
            "customer", "create", "--name", "Mario", "--phone", "3331234567",
            "--address", "Via Roma 1", "--items", "Margherita:1:inf",
        )
        assert result.exit_code == 1
        assert "malformed input" in result.output

    def test_update_only_given_fields(self, run):
        code = _create(run)
        result = run("customer", "update", "--code", code, "--address", "Via Toledo 10")
        assert result.exit_code == 0, result.output
        assert "Via Toledo 10" in result.output
        assert "Mario Rossi" in result.output
        assert "version=1" in result.output

    def test_update_with_nothing_to_change(self, run):
        code = _create(run)
        result = run("customer", "update", "--code", code)
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_cancel(self, run):
        code = _create(run)
        assert run("customer", "cancel", "--code", code).exit_code == 0
        assert "status=CANCELED" in run("customer", "show", "--code", code).output

    def test_cancel_not_editable(self, run):
        code = _create(run)
        run("preparer", "take", "--code", code)
        result = run("customer", "cancel", "--code", code)
        assert result.exit_code == 1
        assert "order not editable" in result.output

    def test_cancel_with_stale_version(self, run):
        code = _create(run)
        run("customer", "update", "--code", code, "--name", "Luigi Verdi")
        result = run("customer", "cancel", "--code", code, "--expected-version", "0")
        assert result.exit_code == 1
        assert "retry" in result.output


class TestPreparerCommands:

    def test_list_and_pending(self, run):
        first = _create(run, "Mario Rossi")
        second = _create(run, "Luigi Verdi")
        listing = run("preparer", "list").output
        assert listing.index(first) < listing.index(second)

        run("preparer", "take", "--code", first)
        pending = run("preparer", "pending").output
        assert first not in pending
        assert second in pending

    def test_empty_listing(self, run):
        assert "No orders found." in run("preparer", "list").output

    def test_take_next_then_blocked(self, run):
        first = _create(run)
        _create(run)
        result = run("preparer", "take-next")
        assert result.exit_code == 0
        assert first in result.output

        blocked = run("preparer", "take-next")
        assert blocked.exit_code == 1
        assert "another order is active" in blocked.output

    def test_take_next_nothing_to_take(self, run):
        result = run("preparer", "take-next")
        assert result.exit_code == 1
        assert "nothing to take" in result.output

    def test_take_wrong_status(self, run):
        code = _create(run)
        run("customer", "cancel", "--code", code)
        result = run("preparer", "take", "--code", code)
        assert result.exit_code == 1
        assert "wrong status" in result.output

    def test_status_walk(self, run):
        code = _create(run)
        run("preparer", "take", "--code", code)
        assert run("preparer", "status", "--code", code, "--status", "ready").exit_code == 0
        result = run("preparer", "status", "--code", code, "--status", "COMPLETED")
        assert result.exit_code == 0
        assert "COMPLETED" in result.output

    def test_bad_status_value(self, run):
        code = _create(run)
        result = run("preparer", "status", "--code", code, "--status", "BURNT")
        assert result.exit_code == 1
        assert "bad status value" in result.output

    def test_illegal_transition(self, run):
        code = _create(run)
        result = run("preparer", "status", "--code", code, "--status", "COMPLETED")
        assert result.exit_code == 1
        assert "bad status value" in result.output
