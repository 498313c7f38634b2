"""
Integration tests for a full purchase entry session and the CLI.
"""
import asyncio
import json
from decimal import Decimal

import pytest
from click.testing import CliRunner

from main import cli
from models.result import ErrorKey
from purchasing.calculator import format_money
from purchasing.controller import (
    OrderFormController, STATE_EDITING, STATE_SUBMITTING, STATE_VALIDATING,
)
from purchasing.validator import OrderValidator


@pytest.mark.integration
class TestPurchaseSession:
    """Drive the controller the way the entry screen does."""

    def test_three_items_one_left_blank(self, controller, gateway):
        controller.update_metadata_field("supplier_name", "Green Valley Traders")
        first = controller.order.items[0].id
        second = controller.add_item()
        controller.add_item()
        assert len(controller.order.items) == 3

        controller.update_item(first, "product_name", "Gauze Roll")
        controller.update_item(first, "quantity", "2")
        controller.update_item(first, "cost_price", "100")
        controller.update_item(second, "product_name", "Cotton Pack")
        controller.update_item(second, "quantity", "1")
        controller.update_item(second, "cost_price", "50")

        outcome = asyncio.run(controller.submit())

        assert outcome.status == "invalid"
        assert controller.errors == {
            ErrorKey.for_item("product_name", 2): "Product name is required",
            ErrorKey.for_item("quantity", 2): "Quantity is required",
            ErrorKey.for_item("cost_price", 2): "Cost price is required",
        }
        assert controller.order_total == Decimal("250")
        assert format_money(controller.order_total) == "₹250.00"
        assert gateway.snapshots == []

    def test_valid_order_walks_every_state(self, controller, gateway, fill_valid_order):
        transitions = [controller.state]

        class SpyValidator(OrderValidator):
            def validate(self, order):
                transitions.append(controller.state)
                return super().validate(order)

        class SpyGateway:
            async def submit(self, snapshot):
                transitions.append(controller.state)
                return await gateway.submit(snapshot)

        controller.validator = SpyValidator()
        controller.gateway = SpyGateway()
        fill_valid_order(controller)

        outcome = asyncio.run(controller.submit())
        transitions.append(controller.state)

        assert outcome.status == "recorded"
        assert transitions == [STATE_EDITING, STATE_VALIDATING, STATE_SUBMITTING, STATE_EDITING]
        assert len(controller.order.items) == 1
        assert controller.order.items[0].product_name == ""
        assert controller.order.metadata.supplier_name == ""
        assert controller.errors == {}

    def test_removing_an_item_shifts_error_positions(self, controller):
        controller.update_metadata_field("supplier_name", "Acme")
        first = controller.order.items[0].id
        middle = controller.add_item()
        last = controller.add_item()
        for item_id in (first, middle):
            controller.update_item(item_id, "product_name", "Bandage")
            controller.update_item(item_id, "quantity", "1")
            controller.update_item(item_id, "cost_price", "10")

        asyncio.run(controller.submit())
        assert controller.error_for("product_name", last) == "Product name is required"

        controller.remove_item(middle)
        # The blank item now sits at position 1; errors are re-keyed on the next pass
        asyncio.run(controller.submit())

        assert [i.id for i in controller.order.items] == [first, last]
        assert set(controller.errors) == {
            ErrorKey.for_item("product_name", 1),
            ErrorKey.for_item("quantity", 1),
            ErrorKey.for_item("cost_price", 1),
        }

    def test_cancel_mid_session(self, controller, gateway):
        controller.update_metadata_field("supplier_name", "Acme")
        controller.update_metadata_field("payment_mode", "Credit")
        controller.add_item()
        old_ids = {i.id for i in controller.order.items}

        controller.cancel()

        assert len(controller.order.items) == 1
        assert controller.order.items[0].id not in old_ids
        assert controller.order.metadata.payment_mode.value == "Cash"
        assert gateway.snapshots == []


@pytest.mark.integration
class TestCli:
    """End-to-end runs of the click commands."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    def _write_draft(self, temp_dir, draft) -> str:
        path = temp_dir / "draft.json"
        path.write_text(json.dumps(draft), encoding="utf-8")
        return str(path)

    def test_record_valid_draft(self, runner, test_config, temp_dir):
        draft_file = self._write_draft(temp_dir, {
            "supplier_name": "Acme Pharma Distributors",
            "payment_mode": "UPI",
            "paid_amount": "300",
            "items": [
                {"product_name": "Gauze Roll", "quantity": "2", "cost_price": "100"},
                {"product_name": "Cotton Pack", "quantity": "1", "cost_price": "50",
                 "expiry_date": "2026-06-30"},
            ],
        })

        result = runner.invoke(cli, ["record", draft_file, "--delay", "0"])

        assert result.exit_code == 0, result.output
        assert "Total Amount: ₹250.00" in result.output
        assert "Excess: ₹50.00" in result.output
        assert "Purchase Recorded Successfully!" in result.output
        assert "Reference: PUR-00001" in result.output

    def test_record_reports_errors(self, runner, test_config, temp_dir):
        draft_file = self._write_draft(temp_dir, {
            "supplier_name": "",
            "items": [
                {"product_name": "Gauze Roll", "quantity": "2", "cost_price": "100"},
                {"product_name": "", "quantity": "0", "cost_price": ""},
            ],
        })

        result = runner.invoke(cli, ["record", draft_file, "--delay", "0"])

        assert result.exit_code == 1
        assert "4 field(s) need attention" in result.output
        assert "Supplier name is required" in result.output
        assert "Item 2: Quantity must be greater than 0" in result.output
        assert "Item 2: Cost price is required" in result.output

    def test_record_gateway_failure(self, runner, test_config, temp_dir):
        draft_file = self._write_draft(temp_dir, {
            "supplier_name": "Acme",
            "items": [{"product_name": "Gauze Roll", "quantity": "2", "cost_price": "100"}],
        })

        result = runner.invoke(cli, ["record", draft_file, "--delay", "0", "--fail", "ledger offline"])

        assert result.exit_code == 1
        assert "Purchase could not be recorded: ledger offline" in result.output

    def test_record_rejects_bad_payment_mode(self, runner, test_config, temp_dir):
        draft_file = self._write_draft(temp_dir, {"payment_mode": "Barter", "items": []})

        result = runner.invoke(cli, ["record", draft_file])

        assert result.exit_code == 1
        assert "invalid draft" in result.output

    def test_suggest(self, runner, test_config, sample_suppliers_csv, sample_products_csv):
        result = runner.invoke(cli, ["suggest", "product", "paracet"])

        assert result.exit_code == 0, result.output
        assert "MED-001" in result.output
        assert "cost ₹22.50" in result.output

    def test_suggest_no_match(self, runner, test_config, sample_suppliers_csv, sample_products_csv):
        result = runner.invoke(cli, ["suggest", "supplier", "zzqx"])

        assert "No supplier matches for 'zzqx'" in result.output

    def test_check(self, runner, test_config, sample_suppliers_csv):
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "suppliers.csv" in result.output
        assert "(3 loaded)" in result.output
        assert "products.csv" in result.output
        assert "file not found" in result.output
