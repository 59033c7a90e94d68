"""Tests for stored monthly budgets."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerbook.cli.main import cli
from ledgerbook.domain.budget import month_bounds
from ledgerbook.domain.errors import NotFoundError, ValidationError


class TestMonthBounds:
    def test_regular_month(self):
        assert month_bounds("2024-03") == (date(2024, 3, 1), date(2024, 3, 31))

    def test_leap_february(self):
        assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    @pytest.mark.parametrize("month_key", ["2024-13", "2024-3", "24-03", "2024/03", "march"])
    def test_rejects_malformed(self, month_key):
        with pytest.raises(ValidationError, match="YYYY-MM"):
            month_bounds(month_key)


class TestBudgetService:
    """Tests for BudgetService."""

    def test_set_and_get(self, budget_service, seeded_chart):
        budget_service.set_budget(
            "2024-01", Decimal("1000"), {"exp_groceries": Decimal("500")}
        )

        budget = budget_service.get_budget("2024-01")
        assert budget.limit == Decimal("1000")
        assert budget.account_limits == {"exp_groceries": Decimal("500")}

    def test_set_replaces_existing(self, budget_service, seeded_chart):
        budget_service.set_budget(
            "2024-01",
            Decimal("1000"),
            {"exp_groceries": Decimal("500"), "exp_rent": Decimal("400")},
        )
        budget_service.set_budget("2024-01", Decimal("800"), {"exp_rent": Decimal("450")})

        budget = budget_service.get_budget("2024-01")
        assert budget.limit == Decimal("800")
        assert budget.account_limits == {"exp_rent": Decimal("450")}
        assert len(budget_service.list_budgets()) == 1

    def test_limit_defaults_to_sum_of_account_limits(self, budget_service, seeded_chart):
        budget = budget_service.set_budget(
            "2024-02",
            account_limits={"exp_groceries": Decimal("500"), "exp_rent": Decimal("400.50")},
        )

        assert budget.limit == Decimal("900.50")

    def test_needs_some_limit(self, budget_service, seeded_chart):
        with pytest.raises(ValidationError, match="at least one account limit"):
            budget_service.set_budget("2024-02")

    def test_list_ordered_by_month(self, budget_service, seeded_chart):
        budget_service.set_budget("2024-03", Decimal("100"))
        budget_service.set_budget("2023-12", Decimal("100"))

        assert [b.month_key for b in budget_service.list_budgets()] == ["2023-12", "2024-03"]

    @pytest.mark.parametrize("amount", ["-1", "10.005"])
    def test_rejects_bad_amounts(self, budget_service, seeded_chart, amount):
        with pytest.raises(ValidationError):
            budget_service.set_budget("2024-01", Decimal(amount))
        with pytest.raises(ValidationError):
            budget_service.set_budget("2024-01", account_limits={"exp_rent": Decimal(amount)})

    def test_rejects_unknown_and_non_expense_accounts(self, budget_service, seeded_chart):
        with pytest.raises(NotFoundError):
            budget_service.set_budget("2024-01", account_limits={"missing": Decimal("10")})
        with pytest.raises(ValidationError, match="expense accounts"):
            budget_service.set_budget(
                "2024-01", account_limits={"asset_bank_main": Decimal("10")}
            )
        assert budget_service.list_budgets() == []

    def test_get_missing_month(self, budget_service):
        with pytest.raises(NotFoundError, match="No budget stored for 2024-05"):
            budget_service.get_budget("2024-05")


class TestMonthlyBudgetReport:
    def test_overall_limit_against_all_expenses(
        self, budget_service, report_service, sample_ledger
    ):
        budget_service.set_budget("2024-01", Decimal("400"), {"exp_groceries": Decimal("500")})

        report = report_service.monthly_budget("2024-01")

        (line,) = report.lines
        assert line.spent == Decimal("450.50")
        assert not line.is_over_budget
        assert report.overall_limit == Decimal("400")
        assert report.total_expenses == Decimal("450.50")
        assert report.overall_remaining == Decimal("-50.50")
        assert report.is_over_overall

    def test_only_the_month_counts(self, budget_service, report_service, sample_ledger):
        sample_ledger.create_transaction(
            date=datetime(2024, 2, 3, 10, 0),
            amount=Decimal("1200"),
            account_id="exp_rent",
            payment_account_id="asset_bank_main",
        )
        budget_service.set_budget("2024-02", Decimal("2000"), {"exp_rent": Decimal("1000")})

        report = report_service.monthly_budget("2024-02")

        assert report.start == datetime(2024, 2, 1)
        assert report.end.date() == date(2024, 2, 29)
        assert report.total_expenses == Decimal("1200")
        assert report.lines[0].is_over_budget
        assert not report.is_over_overall

    def test_ad_hoc_limits_have_no_overall(self, report_service, sample_ledger):
        report = report_service.budget({"exp_groceries": Decimal("500")})

        assert report.overall_limit is None
        assert report.overall_remaining is None
        assert not report.is_over_overall

    def test_missing_budget(self, report_service, seeded_chart):
        with pytest.raises(NotFoundError):
            report_service.monthly_budget("2024-01")


class TestBudgetCommands:
    """CLI tests for budget storage and the monthly budget report."""

    def _invoke(self, cli_runner, temp_db, *args):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])

    def test_set_then_report_month(self, cli_runner, temp_db, sample_ledger):
        result = self._invoke(
            cli_runner,
            temp_db,
            "budget",
            "set",
            "2024-01",
            "--total",
            "400",
            "--limit",
            "Groceries & Supplies=500",
        )
        assert result.exit_code == 0, result.output
        assert "Saved budget for 2024-01: 400.00 (1 account limit(s))" in result.output

        result = self._invoke(cli_runner, temp_db, "report", "budget", "--month", "2024-01")
        assert result.exit_code == 0, result.output
        assert "2024-01-01 to 2024-01-31" in result.output
        assert "Groceries & Supplies" in result.output
        assert "ALL EXPENSES" in result.output
        assert "-50.50 OVER" in result.output

    def test_budget_list(self, cli_runner, temp_db, budget_service, seeded_chart):
        budget_service.set_budget("2024-01", Decimal("400"))

        result = self._invoke(cli_runner, temp_db, "budget", "list")

        assert result.exit_code == 0
        assert "2024-01" in result.output
        assert "400.00" in result.output

    def test_set_rejects_bad_month(self, cli_runner, temp_db, seeded_chart):
        result = self._invoke(cli_runner, temp_db, "budget", "set", "2024-1", "--total", "10")

        assert result.exit_code == 1
        assert "YYYY-MM" in result.output

    def test_report_month_without_budget(self, cli_runner, temp_db, seeded_chart):
        result = self._invoke(cli_runner, temp_db, "report", "budget", "--month", "2024-01")

        assert result.exit_code == 1
        assert "No budget stored for 2024-01" in result.output

    def test_report_needs_limit_or_month(self, cli_runner, temp_db, seeded_chart):
        result = self._invoke(cli_runner, temp_db, "report", "budget")

        assert result.exit_code == 1
        assert "Give either --limit or --month" in result.output

    def test_month_excludes_date_range(self, cli_runner, temp_db, seeded_chart):
        result = self._invoke(
            cli_runner, temp_db, "report", "budget", "--month", "2024-01", "--this-month"
        )

        assert result.exit_code == 1
        assert "cannot be combined" in result.output
