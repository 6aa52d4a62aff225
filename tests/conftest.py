"""Pytest configuration and fixtures."""

import json
from collections.abc import Generator
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from finsight.application.services import reset_services
from finsight.config import reset_settings
from finsight.core.entities import (
    Budget,
    BudgetProgress,
    InsightPeriod,
    StoredInsight,
    Transaction,
)
from finsight.infrastructure.cache import reset_insight_cache
from finsight.infrastructure.llm import reset_model_gateway


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temp data dir and drop every singleton around each test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("LLM_OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ENVIRONMENT", "development")
    reset_settings()
    reset_services()
    reset_insight_cache()
    reset_model_gateway()
    yield
    reset_settings()
    reset_services()
    reset_insight_cache()
    reset_model_gateway()


@pytest.fixture
def period() -> InsightPeriod:
    return InsightPeriod(start=date(2024, 1, 1), end=date(2024, 1, 31))


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Food 600, Transport 400, Fun 500: Food is 40% of 1500."""
    rows = [
        ("t1", date(2024, 1, 2), "250.00", "Food", "Tesco"),
        ("t2", date(2024, 1, 3), "400.00", "Transport", "TfL"),
        ("t3", date(2024, 1, 9), "350.00", "Food", "Sainsbury's"),
        ("t4", date(2024, 1, 15), "500.00", "Fun", None),
    ]
    return [
        Transaction(
            id=txn_id,
            user_id="user-1",
            date=day,
            amount=Decimal(amount),
            category=category,
            merchant=merchant,
        )
        for txn_id, day, amount, category, merchant in rows
    ]


@pytest.fixture
def sample_budget() -> Budget:
    return Budget(
        id="b1",
        user_id="user-1",
        name="Groceries",
        amount=Decimal("500.00"),
        category="Food",
    )


@pytest.fixture
def sample_budget_progress(sample_budget: Budget) -> BudgetProgress:
    return BudgetProgress(
        budget=sample_budget,
        current_spending=Decimal("600.00"),
        percentage=120.0,
        remaining=Decimal("-100.00"),
    )


@pytest.fixture
def valid_reply() -> str:
    """A well-formed model reply wrapped in prose."""
    body = {
        "monthlySummary": "You spent £1,500.00 this month, mostly on food.",
        "categoryInsights": [
            {
                "category": "Food",
                "total_spent": 600,
                "percentage_of_total": 40,
                "insight": "Food is your largest category.",
            }
        ],
        "spendingSpikes": [
            {
                "date": "2024-01-09",
                "amount": 350,
                "category": "Food",
                "description": "Large grocery shop.",
            }
        ],
        "recommendations": ["Plan meals ahead", "Use a shopping list"],
        "projections": {
            "next_week": 350,
            "next_month": 1500,
            "confidence": "medium",
            "explanation": "Based on the last four weeks.",
        },
    }
    return "Here is your analysis:\n" + json.dumps(body) + "\nHope this helps!"


@pytest.fixture
def make_insight():
    """Factory for StoredInsight records."""

    def _make(
        user_id: str = "user-1",
        start: date = date(2024, 1, 1),
        end: date = date(2024, 1, 31),
        summary: str = "Spending was steady.",
        generated_at: datetime | None = None,
        **kwargs,
    ) -> StoredInsight:
        return StoredInsight(
            user_id=user_id,
            period_start=start,
            period_end=end,
            monthly_summary=summary,
            generated_at=generated_at or datetime(2024, 2, 1, tzinfo=timezone.utc),
            **kwargs,
        )

    return _make


@pytest.fixture
def later():
    """Offset helper for generated_at ordering."""

    def _later(minutes: int) -> datetime:
        return datetime(2024, 2, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)

    return _later
