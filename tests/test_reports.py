"""Tests for the aggregate report builders."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerbook.domain.chart import DEFAULT_ACCOUNTS
from ledgerbook.domain.entities import AccountClass, Transaction
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.domain.hierarchy import find_node
from ledgerbook.domain.reports import (
    CLOSING_CONTRA_ID,
    build_balance_sheet,
    build_budget_report,
    build_cash_flow,
    build_cash_position,
    build_income_statement,
    build_trial_balance,
    net_income_closing_entry,
    tree_lines,
)


def _txn(amount, debit, credit, when):
    return Transaction(
        id=f"{debit}-{credit}-{when.isoformat()}",
        date=when,
        amount=Decimal(amount),
        account_id=debit,
        payment_account_id=credit,
    )


@pytest.fixture
def ledger():
    return [
        _txn("50000", "asset_bank_main", "equity_opening", datetime(2024, 1, 1)),
        _txn("15000", "asset_bank_main", "inc_salary", datetime(2024, 1, 1, 9)),
        _txn("8000", "asset_bank_main", "rev_consulting", datetime(2024, 1, 20)),
        _txn("1200", "cogs_hosting", "asset_bank_main", datetime(2024, 1, 21)),
        _txn("450.50", "exp_groceries", "asset_bank_main", datetime(2024, 1, 5)),
        _txn("30000", "12100", "asset_bank_main", datetime(2024, 1, 10)),
        _txn("5000", "asset_bank_main", "liab_ap_general", datetime(2024, 1, 15)),
        _txn("25000", "exp_rent", "asset_bank_main", datetime(2024, 2, 1)),
    ]


class TestTrialBalance:
    """Tests for build_trial_balance."""

    def test_balanced_for_double_sided_postings(self, ledger):
        report = build_trial_balance(DEFAULT_ACCOUNTS, ledger)
        assert report.total_debit == report.total_credit
        assert report.is_balanced

    def test_columns_follow_sign(self, ledger):
        report = build_trial_balance(DEFAULT_ACCOUNTS, ledger)
        rows = {row.account.id: row for row in report.rows}

        assert rows["exp_groceries"].debit == Decimal("450.50")
        assert rows["exp_groceries"].credit == Decimal("0")
        assert rows["inc_salary"].credit == Decimal("15000")
        assert rows["inc_salary"].debit == Decimal("0")

    def test_zero_balance_accounts_skipped(self, ledger):
        report = build_trial_balance(DEFAULT_ACCOUNTS, ledger)
        ids = {row.account.id for row in report.rows}
        assert "asset_wallet" not in ids
        assert "11100" not in ids

    def test_as_of_limits_postings(self, ledger):
        report = build_trial_balance(DEFAULT_ACCOUNTS, ledger, as_of=date(2024, 1, 31))
        ids = {row.account.id for row in report.rows}
        assert "exp_rent" not in ids
        assert report.is_balanced

    def test_grouped_by_class_and_code(self, ledger):
        report = build_trial_balance(DEFAULT_ACCOUNTS, ledger)
        codes = [row.account.code for row in report.groups[AccountClass.ASSETS]]
        assert codes == sorted(codes)


class TestIncomeStatement:
    """Tests for build_income_statement."""

    def test_sections_and_totals(self, ledger):
        report = build_income_statement(DEFAULT_ACCOUNTS, ledger, date(2024, 1, 1), date(2024, 1, 31))

        assert report.total_revenue == Decimal("23000")
        assert [line.account.id for line in report.direct_costs] == ["cogs_hosting"]
        assert report.gross_profit == Decimal("21800")
        assert report.total_operating_expenses == Decimal("450.50")
        assert report.net_income == Decimal("21349.50")

    def test_period_only(self, ledger):
        report = build_income_statement(DEFAULT_ACCOUNTS, ledger, date(2024, 2, 1), date(2024, 2, 29))
        assert report.total_revenue == Decimal("0")
        assert report.net_income == Decimal("-25000")

    def test_tiny_lines_suppressed(self):
        ledger = [_txn("0.01", "exp_transport", "asset_cash", datetime(2024, 1, 1))]
        report = build_income_statement(DEFAULT_ACCOUNTS, ledger, None, None)
        assert report.operating_expenses == ()


class TestBalanceSheet:
    """Tests for build_balance_sheet."""

    def test_balanced_after_net_income_closing(self, ledger):
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger)

        assert report.net_income == Decimal("-3650.50")
        assert report.total_assets == report.total_liabilities + report.total_equity
        assert report.is_balanced

    def test_profit_credits_retained_earnings(self, ledger):
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger, as_of=date(2024, 1, 31))

        assert report.net_income == Decimal("21349.50")
        retained = find_node(report.section(AccountClass.EQUITY), "equity_retained")
        assert retained.total_balance == Decimal("-21349.50")
        assert report.is_balanced

    def test_profit_and_loss_sections_unaffected_by_closing(self, ledger):
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger)
        assert find_node(report.tree[AccountClass.REVENUE], "inc_salary").total_balance == Decimal(
            "-15000"
        )

    def test_totals(self, ledger):
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger)
        assert report.total_liabilities == Decimal("5000")
        assert report.total_assets == Decimal("51349.50")
        assert report.total_equity == Decimal("46349.50")

    def test_missing_retained_earnings_raises(self, ledger):
        accounts = [a for a in DEFAULT_ACCOUNTS if a.id != "equity_retained"]
        with pytest.raises(NotFoundError):
            build_balance_sheet(accounts, ledger)

    def test_no_closing_entry_when_flat(self):
        ledger = [_txn("100", "asset_cash", "equity_opening", datetime(2024, 1, 1))]
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger)
        assert report.net_income == Decimal("0")
        assert report.is_balanced

    def test_closing_entry_direction(self):
        at = datetime(2024, 12, 31)
        profit = net_income_closing_entry(Decimal("10"), "equity_retained", at)
        loss = net_income_closing_entry(Decimal("-10"), "equity_retained", at)

        assert profit.payment_account_id == "equity_retained"
        assert profit.account_id == CLOSING_CONTRA_ID
        assert loss.account_id == "equity_retained"
        assert loss.amount == Decimal("10")

    def test_tree_lines_in_natural_sign(self, ledger):
        report = build_balance_sheet(DEFAULT_ACCOUNTS, ledger)
        lines = tree_lines(report.section(AccountClass.LIABILITIES), AccountClass.LIABILITIES)

        assert lines[0].node.id == "20000"
        assert lines[0].amount == Decimal("5000")
        assert [line.depth for line in lines] == sorted(line.depth for line in lines)


class TestCashFlow:
    """Tests for build_cash_flow."""

    def test_classifies_by_contra_account(self, ledger):
        report = build_cash_flow(DEFAULT_ACCOUNTS, ledger, date(2024, 1, 1), date(2024, 1, 31))

        assert report.operating.inflow == Decimal("23000")
        assert report.operating.outflow == Decimal("1650.50")
        assert report.investing.outflow == Decimal("30000")
        assert report.financing.inflow == Decimal("55000")

    def test_opening_and_closing_cash(self, ledger):
        report = build_cash_flow(DEFAULT_ACCOUNTS, ledger, date(2024, 2, 1), date(2024, 2, 29))

        assert report.opening_cash == Decimal("46349.50")
        assert report.operating.outflow == Decimal("25000")
        assert report.closing_cash == Decimal("21349.50")

    def test_transfers_between_cash_accounts_skipped(self):
        ledger = [_txn("100", "asset_cash", "asset_bank_main", datetime(2024, 1, 1))]
        report = build_cash_flow(DEFAULT_ACCOUNTS, ledger, None, None)
        assert report.net_change == Decimal("0")
        assert report.operating.inflow == Decimal("0")

    def test_missing_contra_is_financing(self):
        ledger = [_txn("70", "asset_cash", None, datetime(2024, 1, 1))]
        report = build_cash_flow(DEFAULT_ACCOUNTS, ledger, None, None)
        assert report.financing.inflow == Decimal("70")


def test_cash_position(ledger):
    balances = build_cash_position(DEFAULT_ACCOUNTS, ledger)

    assert [entry.account.id for entry in balances] == [
        "asset_bank_main",
        "asset_cash",
        "asset_wallet",
    ]
    assert balances[0].balance == Decimal("21349.50")
    assert balances[1].balance == Decimal("0")


def test_budget_report(ledger):
    report = build_budget_report(
        DEFAULT_ACCOUNTS,
        ledger,
        {"exp_groceries": Decimal("400"), "60000": Decimal("30000"), "ghost": Decimal("5")},
        date(2024, 1, 1),
        date(2024, 2, 29),
    )
    lines = {line.account.id: line for line in report.lines}

    assert set(lines) == {"exp_groceries", "60000"}
    assert lines["exp_groceries"].is_over_budget
    assert lines["60000"].spent == Decimal("25450.50")
    assert lines["60000"].remaining == Decimal("4549.50")
    assert report.total_limit == Decimal("30400")
