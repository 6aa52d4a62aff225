"""
Analytics Aggregator.

Turns raw transactions and budgets into the AnalyticsSnapshot the
prompt builder renders. Pure arithmetic over store reads; the
transaction and budget reads are independent and run concurrently.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal

from finsight.config import get_logger
from finsight.core.entities.analytics import (
    AnalyticsSnapshot,
    BudgetHealth,
    BudgetStatus,
    CategoryBreakdown,
    MerchantTotal,
    TrendGrouping,
    TrendPoint,
)
from finsight.core.entities.finance import Transaction, TransactionFilters
from finsight.core.entities.insight import InsightPeriod
from finsight.core.interfaces.storage import IBudgetStore, ITransactionStore

logger = get_logger(__name__)

TOP_MERCHANT_LIMIT = 5
NEAR_BUDGET_PERCENT = 80.0
OVER_BUDGET_PERCENT = 100.0


def percentage_of(part: Decimal, total: Decimal) -> float:
    """part / total * 100, or 0 when total is 0."""
    if total <= 0:
        return 0.0
    return float(part / total * 100)


def build_category_breakdown(transactions: list[Transaction]) -> list[CategoryBreakdown]:
    """Group by category, keeping first-seen order."""
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = defaultdict(int)
    for txn in transactions:
        totals[txn.category] = totals.get(txn.category, Decimal("0")) + txn.amount
        counts[txn.category] += 1

    total_spending = sum(totals.values(), Decimal("0"))
    return [
        CategoryBreakdown(
            category=category,
            total=total,
            count=counts[category],
            percentage=percentage_of(total, total_spending),
        )
        for category, total in totals.items()
    ]


def build_top_merchants(
    transactions: list[Transaction], limit: int = TOP_MERCHANT_LIMIT
) -> list[MerchantTotal]:
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if not txn.merchant:
            continue
        totals[txn.merchant] = totals.get(txn.merchant, Decimal("0")) + txn.amount

    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [MerchantTotal(merchant=name, total=total) for name, total in ranked[:limit]]


def _group_key(day: date, grouping: TrendGrouping) -> date:
    if grouping == TrendGrouping.WEEK:
        return day - timedelta(days=day.weekday())
    if grouping == TrendGrouping.MONTH:
        return day.replace(day=1)
    return day


def build_trends(
    transactions: list[Transaction], grouping: TrendGrouping = TrendGrouping.DAY
) -> list[TrendPoint]:
    """
    Bucket spending by day, ISO week (keyed by Monday) or month.

    Returns points sorted by date ascending.
    """
    amounts: dict[date, Decimal] = {}
    counts: dict[date, int] = defaultdict(int)
    for txn in transactions:
        key = _group_key(txn.date, grouping)
        amounts[key] = amounts.get(key, Decimal("0")) + txn.amount
        counts[key] += 1

    return [
        TrendPoint(date=key, amount=amounts[key], transaction_count=counts[key])
        for key in sorted(amounts)
    ]


def budget_health(percentage: float) -> BudgetHealth:
    if percentage >= OVER_BUDGET_PERCENT:
        return BudgetHealth.OVER
    if percentage >= NEAR_BUDGET_PERCENT:
        return BudgetHealth.NEAR
    return BudgetHealth.UNDER


class AnalyticsAggregator:
    """Builds analytics snapshots from the transaction and budget stores."""

    def __init__(
        self,
        transaction_store: ITransactionStore,
        budget_store: IBudgetStore,
    ) -> None:
        self._transactions = transaction_store
        self._budgets = budget_store

    async def aggregate(
        self,
        user_id: str,
        period: InsightPeriod,
        category: str | None = None,
    ) -> AnalyticsSnapshot:
        """
        Build the snapshot for one user and period.

        Zero transactions yield zeroed totals and an empty breakdown.

        Args:
            user_id: Owner of the data
            period: Inclusive date range
            category: Optional category filter

        Returns:
            AnalyticsSnapshot with breakdown, merchants, budgets and daily trends
        """
        filters = TransactionFilters(
            start_date=period.start,
            end_date=period.end,
            category=category,
        )

        transactions, budget_status = await asyncio.gather(
            self._transactions.find_transactions(user_id, filters),
            self.get_budget_status(user_id),
        )

        breakdown = build_category_breakdown(transactions)
        merchants = build_top_merchants(transactions)
        trends = build_trends(transactions, TrendGrouping.DAY)

        snapshot = AnalyticsSnapshot(
            total_spending=sum((t.amount for t in transactions), Decimal("0")),
            transaction_count=len(transactions),
            category_breakdown=breakdown,
            top_merchants=merchants or None,
            budget_status=budget_status or None,
            trends=trends or None,
        )

        logger.debug(
            "analytics_aggregated",
            user_id=user_id,
            period_start=period.start.isoformat(),
            period_end=period.end.isoformat(),
            transactions=snapshot.transaction_count,
            categories=len(breakdown),
            budgets=len(budget_status),
        )
        return snapshot

    async def get_budget_status(self, user_id: str) -> list[BudgetStatus]:
        """Every budget with its progress, highest utilisation first."""
        budgets = await self._budgets.find_budgets(user_id)
        progress_list = await asyncio.gather(
            *(self._budgets.get_budget_progress(user_id, b.id) for b in budgets)
        )

        statuses = [
            BudgetStatus(
                budget_id=progress.budget.id,
                name=progress.budget.name,
                percentage_used=progress.percentage,
                spent=progress.current_spending,
                limit=progress.budget.amount,
                status=budget_health(progress.percentage),
            )
            for progress in progress_list
            if progress is not None
        ]
        statuses.sort(key=lambda s: s.percentage_used, reverse=True)
        return statuses
