"""
Prompt construction for spending insights.

Rendering is deterministic: the same snapshot, period and currency
always produce the same prompt string.
"""

from finsight.core.entities.analytics import AnalyticsSnapshot
from finsight.core.entities.finance import Currency
from finsight.core.entities.insight import InsightPeriod
from finsight.core.services.currency import format_amount, get_currency

NO_MERCHANTS = "No merchant data available"
NO_BUDGETS = "No budgets configured"
TREND_EXCERPT_POINTS = 7

RESPONSE_SCHEMA = """{
  "monthlySummary": "...",
  "categoryInsights": [
    {
      "category": "...",
      "total_spent": 0,
      "percentage_of_total": 0,
      "insight": "..."
    }
  ],
  "spendingSpikes": [
    {
      "date": "YYYY-MM-DD",
      "amount": 0,
      "category": "...",
      "description": "..."
    }
  ],
  "recommendations": ["...", "..."],
  "projections": {
    "next_week": 0,
    "next_month": 0,
    "confidence": "high|medium|low",
    "explanation": "..."
  }
}"""

PROMPT_TEMPLATE = """You are a financial advisor analyzing a user's spending patterns.

User Currency: {currency}
Currency Symbol: {symbol}

Period: {start} to {end}
Total Spending: {total}
Number of Transactions: {count}

Category Breakdown:
{categories}

Top Merchants:
{merchants}

Budget Status:
{budgets}

{trends}

Please provide:
1. A brief monthly summary (2-3 sentences)
2. Insights for each major spending category
3. Any unusual spending spikes or patterns
4. 3-5 personalized savings recommendations
5. Spending projections for next week and next month

IMPORTANT: Use the {symbol} symbol for all monetary amounts in your response.

Format your response as JSON with the following structure:
{schema}"""

SYSTEM_TEMPLATE = (
    "You are a financial advisor analyzing spending patterns. "
    "The user's currency is {currency}. "
    "Format all monetary amounts with the {symbol} symbol. "
    "Provide insights in clear, conversational language."
)


def build_prompt(
    snapshot: AnalyticsSnapshot,
    period: InsightPeriod,
    currency: Currency | str,
) -> str:
    """
    Render the insight prompt.

    Args:
        snapshot: Aggregated analytics for the period
        period: Inclusive date range
        currency: Display currency code

    Returns:
        Prompt text ending with the expected JSON shape
    """
    config = get_currency(currency)
    code = config.code

    categories = "\n".join(
        f"- {c.category}: {format_amount(c.total, code)} ({c.percentage:.1f}%)"
        for c in snapshot.category_breakdown
    )

    if snapshot.top_merchants:
        merchants = "\n".join(
            f"- {m.merchant}: {format_amount(m.total, code)}" for m in snapshot.top_merchants
        )
    else:
        merchants = NO_MERCHANTS

    if snapshot.budget_status:
        budgets = "\n".join(
            f"- {b.name}: {b.percentage_used:.1f}% used "
            f"({format_amount(b.spent, code)} of {format_amount(b.limit, code)})"
            for b in snapshot.budget_status
        )
    else:
        budgets = NO_BUDGETS

    trends = ""
    if snapshot.trends:
        recent = snapshot.trends[-TREND_EXCERPT_POINTS:]
        trends = "Recent spending trend:\n" + "\n".join(
            f"- {t.date.isoformat()}: {format_amount(t.amount, code)}" for t in recent
        )

    return PROMPT_TEMPLATE.format(
        currency=code.value,
        symbol=config.symbol,
        start=period.start.isoformat(),
        end=period.end.isoformat(),
        total=format_amount(snapshot.total_spending, code),
        count=snapshot.transaction_count,
        categories=categories,
        merchants=merchants,
        budgets=budgets,
        trends=trends,
        schema=RESPONSE_SCHEMA,
    )


def build_system_message(currency: Currency | str) -> str:
    """Provider system prompt for a currency."""
    config = get_currency(currency)
    return SYSTEM_TEMPLATE.format(currency=config.code.value, symbol=config.symbol)
