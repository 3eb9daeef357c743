"""Tests for the click command line, run against a JSON store in tmp_path."""

import re

import pytest
from click.testing import CliRunner

from ims.infrastructure.cli.main import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    env = {"IMS_DATA_DIR": str(tmp_path), "IMS_RETRY_BACKOFF_MS": "0"}

    def invoke(*args):
        return runner.invoke(cli, list(args), env=env)

    return invoke


def _add_widget(run, stock="10"):
    result = run("product", "add", "--name", "Widget", "--stock", stock)
    assert result.exit_code == 0, result.output
    return re.search(r"Product (\w+) 'Widget' added", result.output).group(1)


def _reserve(run, product_id, quantity):
    result = run("reserve", "--product-id", product_id, "--quantity", quantity)
    assert result.exit_code == 0, result.output
    return re.search(r"Order (\w+) reserved", result.output).group(1)


def test_full_flow(run):
    product_id = _add_widget(run)

    order_id = _reserve(run, product_id, "7")

    result = run("stock", "show", "--product-id", product_id)
    assert "Widget" in result.output
    assert "3 available" in result.output

    result = run("order", "confirm", "--order-id", order_id)
    assert result.exit_code == 0, result.output
    assert f"Order {order_id} confirmed" in result.output

    result = run("order", "show", "--order-id", order_id)
    assert "status=CONFIRMED" in result.output
    assert "Order record created." in result.output


def test_insufficient_stock_exits_nonzero(run):
    product_id = _add_widget(run, stock="3")

    result = run("reserve", "--product-id", product_id, "--quantity", "5")

    assert result.exit_code != 0
    assert "[INSUFFICIENT_STOCK]" in result.output
    assert "Your quantity: 5, Available: 3" in result.output
    assert "(retryable)" not in result.output


def test_duplicate_product_is_a_conflict(run):
    _add_widget(run)
    result = run("product", "add", "--name", "widget", "--stock", "1")
    assert result.exit_code != 0
    assert "[CONFLICT]" in result.output
    assert "(code 409)" in result.output


def test_stock_add_and_list(run):
    product_id = _add_widget(run)
    _reserve(run, product_id, "4")

    result = run("stock", "add", "--product-id", product_id, "--delta", "5")
    assert result.exit_code == 0, result.output
    assert "total is now 15" in result.output

    result = run("stock", "list")
    line = next(l for l in result.output.splitlines() if l.startswith("Widget"))
    assert line.split()[1:] == ["15", "4", "11"]


def test_product_list(run):
    assert "No products found." in run("product", "list").output
    product_id = _add_widget(run)
    assert product_id in run("product", "list").output


def test_unknown_order(run):
    result = run("order", "confirm", "--order-id", "nope")
    assert result.exit_code != 0
    assert "[NOT_FOUND]" in result.output
    assert "(code 404)" in result.output


def test_sweep_with_nothing_due(run):
    result = run("sweep")
    assert result.exit_code == 0
    assert "Expired 0 reservation(s)" in result.output


def test_short_hold_expires_on_next_request(tmp_path):
    runner = CliRunner()
    env = {"IMS_DATA_DIR": str(tmp_path), "IMS_HOLD_MINUTES": "0"}
    added = runner.invoke(cli, ["product", "add", "--name", "Gadget", "--stock", "5"], env=env)
    product_id = re.search(r"Product (\w+)", added.output).group(1)
    reserved = runner.invoke(
        cli, ["reserve", "--product-id", product_id, "--quantity", "5"], env=env
    )
    order_id = re.search(r"Order (\w+) reserved", reserved.output).group(1)

    result = runner.invoke(cli, ["order", "confirm", "--order-id", order_id], env=env)

    assert result.exit_code != 0
    assert "[EXPIRED_RESERVATION]" in result.output
    shown = runner.invoke(cli, ["stock", "show", "--product-id", product_id], env=env)
    assert "5 available" in shown.output


def test_malformed_setting_is_reported_without_traceback(tmp_path):
    env = {"IMS_DATA_DIR": str(tmp_path), "IMS_HOLD_MINUTES": "ten"}

    result = CliRunner().invoke(cli, ["stock", "list"], env=env)

    assert result.exit_code == 1
    assert "IMS_HOLD_MINUTES must be an integer" in result.output
    assert "Traceback" not in result.output
