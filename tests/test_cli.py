"""
Tests for the command line interface.
"""

import json

from typer.testing import CliRunner

from horizon.cli import app
from tests.conftest import FakeClient

runner = CliRunner()

CSV = (
    "Subscription Plan Number,Date,SKU,Unit,Quantity,a,b,c,Amount\n"
    "P1,2024-05-01,B91214 - Compute - E4,OCPU/Hour,100,,,,50.00\n"
    "P1,2024-05-01,B88317 - Block Storage,GB/Month,10,,,,200.00\n"
    "P1,2024-05-02,B91214 - Compute - E4,OCPU/Hour,150,,,,75.00\n"
)


class TestCLI:
    """Tests for CLI commands that need no model."""

    def test_inventory_json(self, tmp_path):
        path = tmp_path / "usage.csv"
        path.write_text(CSV, encoding="utf-8")

        result = runner.invoke(app, ["inventory", str(path), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [i["sku"] for i in data["items"]] == ["B88317", "B91214"]
        assert data["summary"]["total_amount"] == 325.0

    def test_inventory_top(self, tmp_path):
        path = tmp_path / "usage.csv"
        path.write_text(CSV, encoding="utf-8")

        result = runner.invoke(app, ["inventory", str(path), "--top", "1", "--json"])

        data = json.loads(result.stdout)
        assert len(data["items"]) == 1
        assert data["summary"]["skus"] == 2

    def test_inventory_table(self, tmp_path):
        path = tmp_path / "usage.csv"
        path.write_text(CSV, encoding="utf-8")

        result = runner.invoke(app, ["inventory", str(path)])

        assert result.exit_code == 0
        assert "B91214" in result.stdout

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["inventory", str(tmp_path / "nope.csv")])
        assert result.exit_code == 1

    def test_sample_json(self):
        result = runner.invoke(app, ["sample", "--json"])
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 4

    def test_analyze_without_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("API_KEY", raising=False)
        result = runner.invoke(app, ["analyze", "--sample"])
        assert result.exit_code == 1

    def test_analyze_closes_client(self, monkeypatch):
        fake = FakeClient(replies=["raw", []])
        monkeypatch.setattr("horizon.cli.GeminiClient", lambda: fake)

        result = runner.invoke(app, ["analyze", "--sample", "--json"])

        assert result.exit_code == 0
        assert "\"step\": \"complete\"" in result.stdout
        assert fake.closed is True

    def test_digest_closes_client(self, monkeypatch, tmp_path):
        fake = FakeClient(replies=["raw", [], "<p>digest</p>"])
        monkeypatch.setattr("horizon.cli.GeminiClient", lambda: fake)
        output = tmp_path / "digest.html"

        result = runner.invoke(app, ["digest", "--sample", "--output", str(output)])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "<p>digest</p>"
        assert fake.closed is True

    def test_schedule(self):
        result = runner.invoke(app, ["schedule"])
        assert result.exit_code == 0
        assert "weekly" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Horizon v" in result.stdout
