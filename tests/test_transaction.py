"""Tests for recording transactions."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerbook.cli.main import cli
from ledgerbook.domain.entities import TransactionType
from ledgerbook.domain.errors import NotFoundError, ValidationError


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_and_get(self, transaction_service, seeded_chart):
        txn_id = transaction_service.create_transaction(
            date=date(2024, 1, 15),
            amount=Decimal("120.00"),
            account_id="exp_transport",
            payment_account_id="asset_cash",
            transaction_type=TransactionType.EXPENSE,
            note="Fuel",
        )
        txn = transaction_service.get_transaction(txn_id)

        assert txn.date == datetime(2024, 1, 15)
        assert txn.amount == Decimal("120.00")
        assert txn.transaction_type == TransactionType.EXPENSE
        assert txn.note == "Fuel"

    @pytest.mark.parametrize("amount", [Decimal("-1"), Decimal("NaN"), Decimal("Infinity")])
    def test_rejects_bad_amounts(self, transaction_service, seeded_chart, amount):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                date=date(2024, 1, 1), amount=amount, account_id="asset_cash"
            )

    @pytest.mark.parametrize("amount", [Decimal("10.005"), Decimal("0.001")])
    def test_rejects_sub_cent_amounts(self, transaction_service, seeded_chart, amount):
        with pytest.raises(ValidationError, match="more than two decimal places"):
            transaction_service.create_transaction(
                date=date(2024, 1, 1), amount=amount, account_id="asset_cash"
            )
        assert transaction_service.list_transactions() == []

    def test_trailing_zeros_are_whole_cents(self, transaction_service, seeded_chart):
        txn_id = transaction_service.create_transaction(
            date=date(2024, 1, 1), amount=Decimal("10.500"), account_id="asset_cash"
        )
        assert transaction_service.get_transaction(txn_id).amount == Decimal("10.50")

    def test_rejects_sub_cent_original_amount(self, transaction_service, seeded_chart):
        with pytest.raises(ValidationError, match="Original amount"):
            transaction_service.create_transaction(
                date=date(2024, 1, 1),
                amount=Decimal("10"),
                account_id="asset_cash",
                original_amount=Decimal("2.725"),
                currency="USD",
            )

    def test_zero_amount_allowed(self, transaction_service, seeded_chart):
        txn_id = transaction_service.create_transaction(
            date=date(2024, 1, 1), amount=Decimal("0"), account_id="asset_cash"
        )
        assert transaction_service.get_transaction(txn_id).amount == Decimal("0")

    def test_rejects_same_account_both_sides(self, transaction_service, seeded_chart):
        with pytest.raises(ValidationError):
            transaction_service.create_transaction(
                date=date(2024, 1, 1),
                amount=Decimal("5"),
                account_id="asset_cash",
                payment_account_id="asset_cash",
            )

    def test_rejects_unknown_accounts(self, transaction_service, seeded_chart):
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(
                date=date(2024, 1, 1), amount=Decimal("5"), account_id="nope"
            )
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(
                date=date(2024, 1, 1),
                amount=Decimal("5"),
                account_id="asset_cash",
                payment_account_id="nope",
            )

    def test_rejects_unknown_party(self, transaction_service, seeded_chart):
        with pytest.raises(NotFoundError):
            transaction_service.create_transaction(
                date=date(2024, 1, 1),
                amount=Decimal("5"),
                account_id="asset_cash",
                related_party_id="nobody",
            )

    def test_list_filters(self, sample_ledger):
        assert len(sample_ledger.list_transactions()) == 2
        assert len(sample_ledger.list_transactions(account_id="inc_salary")) == 1
        assert len(sample_ledger.list_transactions(account_id="asset_bank_main")) == 2
        # End date covers the whole day.
        in_window = sample_ledger.list_transactions(
            start_date=date(2024, 1, 2), end_date=date(2024, 1, 5)
        )
        assert [t.note for t in in_window] == ["Weekly shop"]

    def test_update(self, sample_ledger):
        txn = sample_ledger.list_transactions(account_id="exp_groceries")[0]
        sample_ledger.update_transaction(txn.id, amount=Decimal("500"), note="Big shop")

        updated = sample_ledger.get_transaction(txn.id)
        assert updated.amount == Decimal("500")
        assert updated.note == "Big shop"

    def test_update_validates(self, sample_ledger):
        txn = sample_ledger.list_transactions(account_id="exp_groceries")[0]
        with pytest.raises(ValidationError):
            sample_ledger.update_transaction(txn.id, payment_account_id="exp_groceries")
        with pytest.raises(ValidationError):
            sample_ledger.update_transaction(txn.id, id="other")
        with pytest.raises(NotFoundError):
            sample_ledger.update_transaction("missing", note="x")

    def test_delete(self, sample_ledger):
        txn = sample_ledger.list_transactions(account_id="exp_groceries")[0]
        sample_ledger.delete_transaction(txn.id)
        assert sample_ledger.get_transaction(txn.id) is None
        with pytest.raises(NotFoundError):
            sample_ledger.delete_transaction(txn.id)


class TestTransactionCommands:
    """Tests for add and transaction CLI commands."""

    def test_add_by_code_and_name(self, cli_runner, temp_db, seeded_chart):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "add",
                "--debit", "Groceries & Supplies",
                "--credit", "11110",
                "--date", "2024-01-05",
                "--amount", "1,450.50",
                "--note", "Weekly shop",
            ],
        )
        assert result.exit_code == 0
        assert "Created transaction" in result.output
        assert "Dr exp_groceries" in result.output
        assert "Cr asset_bank_main" in result.output

        txns = temp_db.list_transactions(account_id="exp_groceries")
        assert txns[0].amount == Decimal("1450.50")
        assert txns[0].date == datetime(2024, 1, 5)

    def test_add_with_time(self, cli_runner, temp_db, seeded_chart):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "add", "--debit", "asset_cash", "--date", "2024-01-05 14:30", "--amount", "10",
            ],
        )
        assert result.exit_code == 0
        assert temp_db.list_transactions()[0].date == datetime(2024, 1, 5, 14, 30)

    def test_add_rejects_negative_amount(self, cli_runner, temp_db, seeded_chart):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "add", "--debit", "asset_cash", "--date", "today", "--amount", "-5",
            ],
        )
        assert result.exit_code == 1
        assert "Invalid amount format" in result.output

    def test_add_unknown_account(self, cli_runner, temp_db, seeded_chart):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "add", "--debit", "nowhere", "--date", "today", "--amount", "5",
            ],
        )
        assert result.exit_code == 1
        assert "Account 'nowhere' not found" in result.output

    def test_list_and_delete(self, cli_runner, temp_db, sample_ledger):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path", temp_db.database_path,
                "transaction", "list", "--account", "asset_bank_main",
            ],
        )
        assert result.exit_code == 0
        assert "Found 2 transaction(s)" in result.output
        assert "Weekly shop" in result.output

        txn_id = temp_db.list_transactions(account_id="inc_salary")[0].id
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "transaction", "delete", txn_id, "--yes"],
        )
        assert result.exit_code == 0
        assert len(temp_db.list_transactions()) == 1

    def test_list_rejects_two_periods(self, cli_runner, temp_db, seeded_chart):
        result = cli_runner.invoke(
            cli,
            ["--db-path", temp_db.database_path, "transaction", "list", "--this-month", "--last-year"],
        )
        assert result.exit_code == 1
        assert "Only one period option" in result.output
