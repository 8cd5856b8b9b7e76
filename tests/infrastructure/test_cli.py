"""End-to-end tests for the click CLI over a JSON data directory."""

import json

import pytest
from click.testing import CliRunner

from ims.infrastructure.cli.main import cli


@pytest.fixture
def run(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("IMS_STORE", "json")
    monkeypatch.setenv("IMS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("IMS_SEED_ON_START", raising=False)
    monkeypatch.delenv("IMS_TAX_RATE", raising=False)
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args))

    return invoke


@pytest.fixture
def seeded(run):
    result = run("seed")
    assert result.exit_code == 0, result.output
    return run


class TestSeedCommand:

    def test_seed_then_reseed(self, run, tmp_path):
        first = run("seed")
        assert first.exit_code == 0
        assert "Seeded inventory with sample data." in first.output
        assert (tmp_path / "data" / "inventory.json").exists()

        second = run("seed")
        assert "Inventory already has data; left untouched." in second.output


class TestInventoryCommands:

    def test_list_flags_low_stock(self, seeded):
        result = seeded("inventory", "list")

        assert result.exit_code == 0
        olive = next(line for line in result.output.splitlines() if "Olive Oil" in line)
        assert olive.endswith("LOW")
        assert "Basmati Rice" in result.output

    def test_list_by_category(self, seeded):
        result = seeded("inventory", "list", "--category", "oil")
        assert "Olive Oil" in result.output
        assert "Basmati Rice" not in result.output

    def test_search_matches_name_or_category(self, seeded):
        by_name = seeded("inventory", "list", "--search", "bas").output
        assert "Basmati Rice" in by_name
        assert "Jasmine Rice" not in by_name

        by_category = seeded("inventory", "list", "--search", "OIL").output
        assert "Sunflower Oil" in by_category
        assert "Olive Oil" in by_category
        assert "Whole Wheat" not in by_category

        assert "No inventory items found." in seeded("inventory", "list", "--search", "ghee").output

    def test_empty_inventory(self, run):
        assert "No inventory items found." in run("inventory", "list").output

    def test_add_update_remove(self, run, tmp_path):
        added = run(
            "inventory", "add",
            "--name", "Brown Rice",
            "--category", "Rice",
            "--quantity", "30",
            "--unit", "kg",
            "--price", "60",
            "--threshold", "10",
        )
        assert added.exit_code == 0, added.output
        assert "'Brown Rice' added (30 kg at ₹60.00)" in added.output

        records = json.loads((tmp_path / "data" / "inventory.json").read_text(encoding="utf-8"))
        item_id = records[0]["id"]

        updated = run("inventory", "update", "--id", item_id, "--price", "65.50")
        assert updated.exit_code == 0, updated.output
        assert "₹65.50" in run("inventory", "list").output

        removed = run("inventory", "remove", "--id", item_id)
        assert removed.exit_code == 0
        assert "No inventory items found." in run("inventory", "list").output

    def test_add_rejects_negative_quantity(self, run):
        result = run(
            "inventory", "add",
            "--name", "Brown Rice",
            "--category", "Rice",
            "--quantity", "-1",
            "--unit", "kg",
            "--price", "60",
            "--threshold", "10",
        )
        assert result.exit_code == 1
        assert "cannot be negative" in result.output

    def test_update_needs_a_field(self, seeded):
        result = seeded("inventory", "update", "--id", "1")
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_remove_unknown_item(self, seeded):
        result = seeded("inventory", "remove", "--id", "missing")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_low_stock(self, seeded):
        result = seeded("inventory", "low-stock")
        assert "Olive Oil" in result.output
        assert "Basmati Rice" not in result.output


class TestSalesCommands:

    def test_record_sale_decrements_stock(self, seeded, tmp_path):
        result = seeded("sales", "record", "--product-id", "3", "--quantity", "20")

        assert result.exit_code == 0, result.output
        assert "20 x Sunflower Oil at ₹120.00 = ₹2,400.00" in result.output
        assert "Remaining stock: 180" in result.output
        assert "Low stock alert" not in result.output
        records = json.loads((tmp_path / "data" / "inventory.json").read_text(encoding="utf-8"))
        assert next(r for r in records if r["id"] == "3")["quantity"] == 180

    def test_record_sale_prints_low_stock_alert(self, seeded):
        result = seeded("sales", "record", "--product-id", "1", "--quantity", "450")

        assert result.exit_code == 0, result.output
        assert "Remaining stock: 50" in result.output
        assert "Low stock alert: Basmati Rice is below the minimum threshold" in result.output

    def test_insufficient_stock(self, seeded):
        result = seeded("sales", "record", "--product-id", "5", "--quantity", "41")

        assert result.exit_code == 1
        assert "Insufficient stock for Olive Oil" in result.output
        assert "only 40 liter available" in result.output
        assert len(seeded("sales", "list").output.splitlines()) == 5

    def test_non_positive_quantity(self, seeded):
        result = seeded("sales", "record", "--product-id", "1", "--quantity", "0")
        assert result.exit_code == 1
        assert "must be positive" in result.output

    def test_unknown_product(self, seeded):
        result = seeded("sales", "record", "--product-id", "99", "--quantity", "1")
        assert result.exit_code == 1
        assert "Product '99' not found" in result.output

    def test_list_and_search(self, seeded):
        assert "Whole Wheat" in seeded("sales", "list").output
        filtered = seeded("sales", "list", "--search", "oil").output
        assert "Sunflower Oil" in filtered
        assert "Whole Wheat" not in filtered
        assert "No sales found." in seeded("sales", "list", "--search", "ghee").output

    def test_receipt(self, seeded):
        result = seeded("sales", "receipt", "--id", "s1")

        assert result.exit_code == 0, result.output
        assert "GST (18%)" in result.output
        assert "₹675.00" in result.output
        assert "₹4,425.00" in result.output

    def test_receipt_unknown_sale(self, seeded):
        result = seeded("sales", "receipt", "--id", "nope")
        assert result.exit_code == 1
        assert "Sale 'nope' not found" in result.output


class TestReportCommands:

    def test_dashboard(self, seeded):
        result = seeded("report", "dashboard")

        assert result.exit_code == 0, result.output
        assert "Products:         5" in result.output
        assert "Total sales:      ₹10,650.00" in result.output
        assert "Olive Oil: 40 liter (threshold 50)" in result.output

    def test_sales_report(self, seeded):
        result = seeded("report", "sales", "--period", "30days")

        assert result.exit_code == 0, result.output
        assert "Units sold:          170" in result.output
        assert "Whole Wheat" in result.output

    def test_rejects_unknown_period(self, seeded):
        result = seeded("report", "sales", "--period", "1year")
        assert result.exit_code == 2


class TestConfiguration:

    def test_bad_setting_reported(self, run, monkeypatch):
        monkeypatch.setenv("IMS_STORE", "firestore")
        result = run("inventory", "list")
        assert result.exit_code == 1
        assert "IMS_STORE must be one of" in result.output

    def test_memory_store_with_seed_on_start(self, run, monkeypatch, tmp_path):
        monkeypatch.setenv("IMS_STORE", "memory")
        monkeypatch.setenv("IMS_SEED_ON_START", "true")

        result = run("inventory", "list")

        assert "Basmati Rice" in result.output
        assert not (tmp_path / "data").exists()

    def test_custom_tax_rate(self, seeded, monkeypatch):
        monkeypatch.setenv("IMS_TAX_RATE", "0.05")
        result = seeded("sales", "receipt", "--id", "s2")
        assert "GST (5%)" in result.output
        assert "₹120.00" in result.output

    def test_malformed_data_file_reported_as_warning(self, run, tmp_path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "inventory.json").write_text('[{"name": "Olive Oil"}]', encoding="utf-8")

        result = run("inventory", "list")

        assert result.exit_code == 0
        assert result.exception is None
        assert "Warning: Cannot read" in result.output
        assert "No inventory items found." in result.output
