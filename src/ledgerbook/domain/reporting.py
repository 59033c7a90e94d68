"""Report domain service.

Loads one snapshot of the ledger per call and hands it to the pure report
builders, so every figure in a report comes from the same data.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.balances import LedgerDiagnostics, find_orphaned_postings
from ledgerbook.domain.budget import BudgetService, month_bounds
from ledgerbook.domain.chart import CASH_GROUP_ID, FIXED_ASSETS_GROUP_ID, RETAINED_EARNINGS_ID
from ledgerbook.domain.entities import LedgerSnapshot
from ledgerbook.domain.reports import (
    BalanceSheet,
    BudgetReport,
    CashBalance,
    CashFlowStatement,
    IncomeStatement,
    TrialBalance,
    build_balance_sheet,
    build_budget_report,
    build_cash_flow,
    build_cash_position,
    build_income_statement,
    build_trial_balance,
)
from ledgerbook.domain.statement import Statement, build_statement

logger = logging.getLogger(__name__)


class ReportService:
    """Service for generating financial reports."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _snapshot(self) -> LedgerSnapshot:
        snapshot = self.db.snapshot()
        logger.debug(
            "Loaded snapshot: %d account(s), %d transaction(s)",
            len(snapshot.accounts),
            len(snapshot.transactions),
        )
        return snapshot

    def trial_balance(self, as_of: Optional[date] = None) -> TrialBalance:
        snapshot = self._snapshot()
        return build_trial_balance(snapshot.accounts, snapshot.transactions, as_of)

    def income_statement(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> IncomeStatement:
        snapshot = self._snapshot()
        return build_income_statement(
            snapshot.accounts, snapshot.transactions, start_date, end_date
        )

    def balance_sheet(
        self,
        as_of: Optional[date] = None,
        retained_earnings_id: str = RETAINED_EARNINGS_ID,
    ) -> BalanceSheet:
        """Balance sheet with current net income closed into retained earnings."""
        snapshot = self._snapshot()
        return build_balance_sheet(
            snapshot.accounts,
            snapshot.transactions,
            as_of,
            retained_earnings_id=retained_earnings_id,
        )

    def cash_flow(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        cash_group_id: str = CASH_GROUP_ID,
        investing_group_id: Optional[str] = FIXED_ASSETS_GROUP_ID,
    ) -> CashFlowStatement:
        snapshot = self._snapshot()
        return build_cash_flow(
            snapshot.accounts,
            snapshot.transactions,
            start_date,
            end_date,
            cash_group_id=cash_group_id,
            investing_group_id=investing_group_id,
        )

    def statement(
        self,
        account_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Statement:
        """Account statement with opening, running and closing balances.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        snapshot = self._snapshot()
        return build_statement(
            account_id,
            snapshot.accounts,
            snapshot.transactions,
            start_date,
            end_date,
            parties=snapshot.party_names(),
        )

    def cash_position(
        self, as_of: Optional[date] = None, cash_group_id: str = CASH_GROUP_ID
    ) -> list[CashBalance]:
        snapshot = self._snapshot()
        return build_cash_position(
            snapshot.accounts, snapshot.transactions, as_of, cash_group_id=cash_group_id
        )

    def budget(
        self,
        limits: Mapping[str, Decimal],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        overall_limit: Optional[Decimal] = None,
    ) -> BudgetReport:
        snapshot = self._snapshot()
        return build_budget_report(
            snapshot.accounts,
            snapshot.transactions,
            limits,
            start_date,
            end_date,
            overall_limit=overall_limit,
        )

    def monthly_budget(self, month_key: str) -> BudgetReport:
        """Compare a stored monthly budget with that month's spending.

        Raises:
            ValidationError: If ``month_key`` is malformed
            NotFoundError: If no budget is stored for the month
        """
        stored = BudgetService(self.db).get_budget(month_key)
        start_date, end_date = month_bounds(month_key)
        return self.budget(
            stored.account_limits, start_date, end_date, overall_limit=stored.limit
        )

    def diagnostics(self) -> LedgerDiagnostics:
        """Count postings that reference accounts missing from the chart."""
        snapshot = self._snapshot()
        return find_orphaned_postings(snapshot.accounts, snapshot.transactions)
