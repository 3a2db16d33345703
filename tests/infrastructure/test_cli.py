"""End-to-end tests for the click CLI against a temporary data directory."""

import pytest
from click.testing import CliRunner

from pizzeria.infrastructure.bootstrap import DATA_DIR_ENV
from pizzeria.infrastructure.cli.main import cli

PAPA = ["--customer-id", "666", "--customer-name", "Papa"]


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    return CliRunner()


def _add(runner, name, price, toppings=None):
    args = ["purchase", "add", *PAPA, "--name", name, "--price", price]
    if toppings:
        args += ["--toppings", toppings]
    return runner.invoke(cli, args)


class TestPurchaseCommands:

    def test_add_creates_draft(self, runner):
        result = _add(runner, "Margherita", "10.00", "tomato,mozzarella")
        assert result.exit_code == 0, result.output
        assert "purchase #1" in result.output
        assert "state=DRAFT" in result.output

    def test_confirm_without_draft_fails(self, runner):
        result = runner.invoke(cli, ["purchase", "confirm", *PAPA])
        assert result.exit_code == 1
        assert "no draft purchase" in result.output

    def test_invalid_price_fails(self, runner):
        result = _add(runner, "Margherita", "ten")
        assert result.exit_code == 1
        assert "Invalid money amount" in result.output

    def test_infinite_price_fails_and_nothing_is_saved(self, runner):
        result = _add(runner, "Margherita", "Infinity")
        assert result.exit_code == 1
        assert "must be finite" in result.output

        result = runner.invoke(cli, ["purchase", "list"])
        assert "No purchases found." in result.output

    def test_list_filters_by_state(self, runner):
        _add(runner, "Margherita", "10.00")
        runner.invoke(cli, ["purchase", "confirm", *PAPA])

        result = runner.invoke(cli, ["purchase", "list", "--state", "PLACED"])
        assert result.exit_code == 0, result.output
        assert "PLACED" in result.output

        result = runner.invoke(cli, ["purchase", "list", "--state", "SERVED"])
        assert "No purchases found." in result.output


class TestFullLifecycle:

    def test_draft_to_served(self, runner):
        _add(runner, "Margherita", "10.00", "tomato,mozzarella")
        _add(runner, "Ham-Pineapple", "12.89", "pepperoni,pineapple,mozzarella")

        result = runner.invoke(cli, ["purchase", "confirm", *PAPA])
        assert result.exit_code == 0, result.output
        assert "placed" in result.output

        result = runner.invoke(cli, ["kitchen", "pick", "--staff-id", "7"])
        assert result.exit_code == 0, result.output
        assert "Purchase #1 is now being prepared by #7." in result.output

        # Reads the purchase back from the store by worker id
        result = runner.invoke(cli, ["kitchen", "current", "--staff-id", "7"])
        assert result.exit_code == 0, result.output
        assert "Purchase #1" in result.output

        result = runner.invoke(cli, ["kitchen", "complete", "--id", "1"])
        assert result.exit_code == 0, result.output
        assert "Purchase #1 served." in result.output
        assert "$21.89" in result.output

        result = runner.invoke(cli, ["kitchen", "complete", "--id", "1"])
        assert result.exit_code == 1
        assert "No ongoing purchase #1" in result.output

        result = runner.invoke(cli, ["kitchen", "current", "--staff-id", "7"])
        assert "#7 is not preparing anything." in result.output

    def test_pick_with_empty_queue(self, runner):
        result = runner.invoke(cli, ["kitchen", "pick", "--staff-id", "7"])
        assert result.exit_code == 0
        assert "No purchase waiting." in result.output

    def test_show_unknown_purchase(self, runner):
        result = runner.invoke(cli, ["purchase", "show", "--id", "3"])
        assert result.exit_code == 1
        assert "not found" in result.output
