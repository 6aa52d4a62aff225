"""
Model reply validation.

Extracts the JSON object from a free-form reply, enforces the required
fields and fills optional ones with safe defaults.
"""

import json
import re
from typing import Any

from finsight.config import get_logger
from finsight.core.entities.insight import (
    CategoryInsight,
    ParsedInsight,
    Projection,
    ProjectionConfidence,
    SpendingSpike,
)
from finsight.core.exceptions import ResponseStructureError

logger = get_logger(__name__)

# Greedy: first "{" to last "}" so prose around the object is ignored
JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

_CONFIDENCE_VALUES = {c.value for c in ProjectionConfidence}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def extract_json_object(reply: str) -> dict[str, Any]:
    """
    Pull the outermost JSON object out of a reply.

    Raises:
        ResponseStructureError: No object found or it does not decode
    """
    match = JSON_OBJECT_RE.search(reply or "")
    if not match:
        raise ResponseStructureError("No JSON found in AI response", reply)
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        raise ResponseStructureError("No JSON found in AI response", reply) from None
    if not isinstance(parsed, dict):
        raise ResponseStructureError("No JSON found in AI response", reply)
    return parsed


def _parse_category_insights(raw: Any, reply: str) -> list[CategoryInsight]:
    if not isinstance(raw, list):
        raise ResponseStructureError("Invalid or missing categoryInsights", reply)

    insights = []
    for index, item in enumerate(raw):
        if not (
            isinstance(item, dict)
            and _is_text(item.get("category"))
            and _is_number(item.get("total_spent"))
            and _is_number(item.get("percentage_of_total"))
            and _is_text(item.get("insight"))
        ):
            raise ResponseStructureError(f"Invalid category insight at index {index}", reply)
        insights.append(
            CategoryInsight(
                category=item["category"],
                total_spent=item["total_spent"],
                percentage_of_total=item["percentage_of_total"],
                insight=item["insight"],
            )
        )
    return insights


def _parse_spikes(raw: Any) -> list[SpendingSpike]:
    if not isinstance(raw, list):
        return []
    spikes = []
    for item in raw:
        if (
            isinstance(item, dict)
            and isinstance(item.get("date"), str)
            and _is_number(item.get("amount"))
            and isinstance(item.get("category"), str)
            and isinstance(item.get("description"), str)
        ):
            spikes.append(
                SpendingSpike(
                    date=item["date"],
                    amount=item["amount"],
                    category=item["category"],
                    description=item["description"],
                )
            )
    return spikes


def _parse_recommendations(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, str)]


def _parse_projections(raw: Any) -> Projection | None:
    """All four fields valid, or nothing."""
    if not isinstance(raw, dict):
        return None
    if not (
        _is_number(raw.get("next_week"))
        and _is_number(raw.get("next_month"))
        and raw.get("confidence") in _CONFIDENCE_VALUES
        and isinstance(raw.get("explanation"), str)
    ):
        return None
    return Projection(
        next_week=raw["next_week"],
        next_month=raw["next_month"],
        confidence=ProjectionConfidence(raw["confidence"]),
        explanation=raw["explanation"],
    )


def parse_insight_reply(reply: str) -> ParsedInsight:
    """
    Validate a raw model reply.

    Args:
        reply: Raw text returned by the gateway

    Returns:
        ParsedInsight with defaults for optional fields

    Raises:
        ResponseStructureError: Missing JSON or required fields
    """
    data = extract_json_object(reply)

    summary = data.get("monthlySummary")
    if not _is_text(summary):
        raise ResponseStructureError("Invalid or missing monthlySummary", reply)

    category_insights = _parse_category_insights(data.get("categoryInsights"), reply)
    projections = _parse_projections(data.get("projections"))

    if "projections" in data and projections is None:
        logger.debug("insight_projections_dropped")

    return ParsedInsight(
        monthly_summary=summary,
        category_insights=category_insights,
        spending_spikes=_parse_spikes(data.get("spendingSpikes")),
        recommendations=_parse_recommendations(data.get("recommendations")),
        projections=projections,
    )
