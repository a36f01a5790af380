"""Tests for the command-line interface."""

import json

from billscan.cli import cli
from click.testing import CliRunner


class TestCli:
    """Test suite for the billscan command group."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_parse_text_file(self, tmp_path):
        """Test parsing a German receipt from a file."""
        receipt = tmp_path / "edeka.txt"
        receipt.write_text("EDEKA\nGesamtbetrag: 15,50€\n12.03.2024\n", encoding="utf-8")

        result = self.runner.invoke(cli, ["parse", str(receipt), "--lang", "deu", "--today", "2025-06-15"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["amount"] == "15.50"
        assert data["date"] == "2024-03-12"
        assert data["description"] == "Edeka"
        assert data["category"] == "Groceries"
        assert data["currency_symbol"] == "€"
        assert data["confidence"] == 95.0

    def test_parse_stdin_with_confidence(self):
        """Test reading receipt text from stdin."""
        result = self.runner.invoke(
            cli,
            ["parse", "-", "--lang", "zh-cn", "--confidence", "72.5", "--today", "2025-06-15"],
            input="星巴克\n实付：¥35.50\n2024年3月8日\n",
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["amount"] == "35.50"
        assert data["description"] == "星巴克"
        assert data["confidence"] == 72.5
        assert data["language"] == "chi_sim"

    def test_parse_missing_file(self, tmp_path):
        """Test that a missing source is a usage error."""
        result = self.runner.invoke(cli, ["parse", str(tmp_path / "missing.txt")])

        assert result.exit_code == 2

    def test_parse_unknown_language(self, tmp_path):
        """Test that an unsupported --lang value is rejected."""
        receipt = tmp_path / "r.txt"
        receipt.write_text("Total 1.00", encoding="utf-8")

        result = self.runner.invoke(cli, ["parse", str(receipt), "--lang", "klingon"])

        assert result.exit_code == 2

    def test_batch(self, tmp_path):
        """Test parsing a folder of receipts to JSON."""
        input_dir = tmp_path / "receipts"
        input_dir.mkdir()
        (input_dir / "a.txt").write_text("Starbucks\nTOTAL: $42.50\n01/15/2024\n", encoding="utf-8")
        (input_dir / "b.txt").write_text("Uber\nTotal 9.99\n02/01/2024\n", encoding="utf-8")
        (input_dir / "c.txt").write_bytes(b"\xff\xfe\xfa\xfb")
        output = tmp_path / "out" / "receipts.json"

        result = self.runner.invoke(cli, [
            "batch", "--in", str(input_dir), "--out", str(output),
            "--max-workers", "2", "--today", "2025-06-15",
        ])

        assert result.exit_code == 0, result.output
        assert "Total files found: 3" in result.output

        data = json.loads(output.read_text(encoding="utf-8"))
        assert [row["file_path"].rsplit("/", 1)[-1] for row in data] == ["a.txt", "b.txt", "c.txt"]
        assert data[0]["amount"] == "42.50"
        assert data[0]["category"] == "Dining Out"
        assert data[0]["needs_review"] is False
        assert data[1]["category"] == "Transportation"
        assert data[2]["amount"] is None
        assert data[2]["confidence"] == 0.0
        assert data[2]["needs_review"] is True

    def test_languages(self):
        """Test listing supported languages."""
        result = self.runner.invoke(cli, ["languages"])

        assert result.exit_code == 0
        assert "chi_sim" in result.output
        assert "EUR €" in result.output
