"""Tests for CLI commands."""

import json

import pytest

from lineform.cli.main import cli

RECEIVE = {
    "profile": "stock-receive",
    "baseCurrency": "TRY",
    "groups": [
        {
            "groupId": "v1",
            "label": "Red / M",
            "entries": [
                {"targetId": "s1", "quantity": "2", "unitPrice": "10", "currency": "USD",
                 "taxPercent": "10", "reason": "restock"},
                {"targetId": "s2", "quantity": "3"},
            ],
        },
        {"groupId": "v2", "label": "Blue / L", "entries": [{"targetId": "s1", "quantity": "1"}]},
    ],
}


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "rates.db")


def run(cli_runner, db_path, *args):
    return cli_runner.invoke(cli, ["--db-path", db_path, *args])


def test_help(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("rate", "quote", "propagate", "submit"):
        assert command in result.output


class TestRateCommands:
    """Tests for the rate book commands."""

    def test_set_and_list(self, cli_runner, db_path):
        result = run(cli_runner, db_path, "rate", "set", "usd", "32.45", "--date", "2024-01-15")
        assert result.exit_code == 0
        assert "Stored rate 1: 1 USD = 32.45" in result.output
        assert "effective 2024-01-15" in result.output

        result = run(cli_runner, db_path, "rate", "list")
        assert result.exit_code == 0
        assert "USD" in result.output
        assert "2024-01-15" in result.output

    def test_list_empty(self, cli_runner, db_path):
        result = run(cli_runner, db_path, "rate", "list")
        assert result.exit_code == 0
        assert "No rates found." in result.output

    def test_set_base_currency_fails(self, cli_runner, db_path):
        result = run(cli_runner, db_path, "rate", "set", "TRY", "2")
        assert result.exit_code == 1
        assert "base currency" in result.output

    def test_set_invalid_multiplier(self, cli_runner, db_path):
        result = run(cli_runner, db_path, "rate", "set", "USD", "abc")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_set_zero_multiplier(self, cli_runner, db_path):
        result = run(cli_runner, db_path, "rate", "set", "USD", "0")
        assert result.exit_code == 1
        assert "greater than 0" in result.output

    def test_delete(self, cli_runner, db_path):
        run(cli_runner, db_path, "rate", "set", "USD", "30")

        result = run(cli_runner, db_path, "rate", "delete", "1")
        assert result.exit_code == 0
        assert "Deleted rate 1" in result.output

        result = run(cli_runner, db_path, "rate", "delete", "1")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestQuote:
    """Tests for the quote command."""

    def test_quote_with_rates(self, cli_runner, db_path, write_document):
        run(cli_runner, db_path, "rate", "set", "USD", "30")
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "quote", path)

        assert result.exit_code == 0
        assert "Profile: stock-receive (base currency TRY)" in result.output
        assert "1 USD = 30.00 TRY" in result.output
        assert "filled" in result.output
        assert "partial" in result.output
        assert "Grand total: 660.00 TRY" in result.output

    def test_quote_warns_on_missing_rate(self, cli_runner, db_path, write_document):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "quote", path)

        assert result.exit_code == 0
        assert "no rate available for USD" in result.output
        assert "Grand total: 22.00 TRY" in result.output

    def test_quote_missing_file(self, cli_runner, db_path, tmp_path):
        result = run(cli_runner, db_path, "quote", str(tmp_path / "missing.json"))
        assert result.exit_code == 1
        assert "Form document not found" in result.output

    def test_quote_adjust_profile(self, cli_runner, db_path, write_document):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "quote", path, "--profile", "stock-adjust")

        assert result.exit_code == 0
        assert "no rate available" not in result.output
        assert "Grand total: 0.00 TRY" in result.output


class TestSubmit:
    """Tests for the submit command."""

    def test_submit_blocked(self, cli_runner, db_path, write_document):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "submit", path)

        assert result.exit_code == 1
        assert "Submission blocked" in result.output
        assert "Unit price must be greater than 0" in result.output

    def test_submit_success(self, cli_runner, db_path, write_document, tmp_path):
        run(cli_runner, db_path, "rate", "set", "USD", "30")
        data = json.loads(json.dumps(RECEIVE))
        data["groups"][0]["entries"][1]["unitPrice"] = "5"
        data["groups"][1]["entries"][0]["unitPrice"] = "7.5"
        path = write_document(data)
        output = str(tmp_path / "records.json")

        result = run(cli_runner, db_path, "submit", path, "-o", output)

        assert result.exit_code == 0
        assert "Wrote 3 records to" in result.output
        with open(output, encoding="utf-8") as f:
            records = json.load(f)
        assert [r["targetId"] for r in records] == ["s1", "s2", "s1"]
        assert records[0] == {
            "targetId": "s1",
            "groupId": "v1",
            "quantity": 2.0,
            "currency": "USD",
            "unitPrice": 10.0,
            "lineTotal": 660.0,
            "taxPercent": 10.0,
            "meta": {"reason": "restock"},
        }
        assert records[2]["lineTotal"] == 7.5

    def test_submit_skips_untouched_entries(self, cli_runner, db_path, write_document):
        path = write_document({"groups": [{"groupId": "v1", "entries": [{}]}]})

        result = run(cli_runner, db_path, "submit", path)

        assert result.exit_code == 0
        assert json.loads(result.output) == []


class TestPropagate:
    """Tests for the propagate command."""

    def test_propagate_group(self, cli_runner, db_path, write_document, tmp_path):
        path = write_document(RECEIVE)
        output = str(tmp_path / "out.json")

        result = run(cli_runner, db_path, "propagate", path, "--group", "v1", "-o", output)

        assert result.exit_code == 0
        assert f"Updated 1 entry in {output}" in result.output
        with open(output, encoding="utf-8") as f:
            data = json.load(f)
        sibling = data["groups"][0]["entries"][1]
        assert sibling["unitPrice"] == "10"
        assert sibling["currency"] == "USD"
        assert sibling["reason"] == "restock"
        assert sibling["quantity"] == "3"
        assert data["groups"][1]["entries"][0]["unitPrice"] == ""

    def test_propagate_all_in_place(self, cli_runner, db_path, write_document):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "propagate", path, "--all")

        assert result.exit_code == 0
        assert "Updated 2 entries" in result.output
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["groups"][1]["entries"][0]["unitPrice"] == "10"
        assert data["groups"][1]["entries"][0]["targetId"] == "s1"

    @pytest.mark.parametrize("options", [[], ["--group", "v1", "--all"]])
    def test_propagate_requires_one_mode(self, cli_runner, db_path, write_document, options):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "propagate", path, *options)

        assert result.exit_code == 1
        assert "exactly one of --group or --all" in result.output

    def test_propagate_unknown_group(self, cli_runner, db_path, write_document):
        path = write_document(RECEIVE)

        result = run(cli_runner, db_path, "propagate", path, "--group", "v9")

        assert result.exit_code == 1
        assert "Error:" in result.output


def test_submit_rejects_comma_quantity(cli_runner, db_path, write_document):
    path = write_document(
        {"groups": [{"groupId": "v1", "entries": [
            {"targetId": "s1", "quantity": "1,5", "unitPrice": "10"}
        ]}]}
    )

    result = run(cli_runner, db_path, "submit", path)

    assert result.exit_code == 1
    assert "Quantity '1,5' is not a valid number" in result.output
