"""Tests for structured logging processors."""

from datetime import date
from decimal import Decimal

import pytest
import structlog

from finsight.config.logging import (
    MASK,
    add_app_context,
    build_processors,
    mask_secrets,
    render_domain_values,
)
from finsight.core.entities import BudgetHealth


class TestMaskSecrets:
    """Tests for credential masking."""

    def test_masks_secret_fields(self):
        """Test that credential fields are replaced by the mask."""
        event = mask_secrets(None, "info", {"event": "call", "api_key": "sk-live-1234", "Authorization": "x"})
        assert event["api_key"] == MASK
        assert event["Authorization"] == MASK
        assert event["event"] == "call"

    def test_masks_key_shaped_substrings(self):
        """Test that bearer tokens inside free text are masked."""
        event = mask_secrets(None, "error", {"event": "provider_error", "error": "401 for Bearer sk-abc123 rejected"})
        assert event["error"] == f"401 for {MASK} rejected"

    def test_empty_secret_field_untouched(self):
        """Test that an unset credential field stays empty."""
        event = mask_secrets(None, "info", {"event": "boot", "api_key": None})
        assert event["api_key"] is None


class TestRenderDomainValues:
    """Tests for domain value rendering."""

    def test_renders_dates_decimals_and_enums(self):
        """Test that domain values become plain strings."""
        event = render_domain_values(
            None,
            "info",
            {
                "event": "snapshot",
                "period_start": date(2024, 1, 1),
                "total": Decimal("1500.00"),
                "health": BudgetHealth.OVER,
                "count": 4,
            },
        )
        assert event["period_start"] == "2024-01-01"
        assert event["total"] == "1500.00"
        assert event["health"] == BudgetHealth.OVER.value
        assert type(event["health"]) is str
        assert event["count"] == 4


class TestProcessorChain:
    """Tests for processor chain assembly."""

    def test_app_context_includes_provider(self):
        """Test that events carry the app and model provider."""
        event = add_app_context(None, "info", {"event": "boot"})
        assert event["app"] == "Finsight"
        assert event["environment"] == "development"
        assert event["llm_provider"] == "openai"

    def test_explicit_provider_kept(self):
        """Test that a provider bound on the event is not overwritten."""
        event = add_app_context(None, "info", {"event": "call", "llm_provider": "anthropic"})
        assert event["llm_provider"] == "anthropic"

    @pytest.mark.parametrize(
        ("environment", "renderer"),
        [
            ("development", structlog.dev.ConsoleRenderer),
            ("staging", structlog.processors.JSONRenderer),
            ("production", structlog.processors.JSONRenderer),
        ],
    )
    def test_renderer_per_environment(self, environment, renderer):
        """Test that each environment ends in its renderer."""
        processors = build_processors(environment)
        assert isinstance(processors[-1], renderer)

    def test_masking_runs_before_rendering(self):
        """Test that secrets are masked before the renderer sees them."""
        processors = build_processors("production")
        assert processors.index(mask_secrets) < len(processors) - 1
        assert processors.index(render_domain_values) < processors.index(mask_secrets)
