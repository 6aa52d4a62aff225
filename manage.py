#!/usr/bin/env python3
"""
Finsight management CLI.

Usage:
    python manage.py migrate                       Apply database migrations
    python manage.py migrate --status              Show migration status
    python manage.py generate-insights --user-id U Generate insights for one user
    python manage.py serve                         Start the API server
"""

import argparse
import asyncio
import sys
import time
from datetime import date, timedelta
from pathlib import Path

RULE = "=" * 50


def cmd_migrate(args: argparse.Namespace) -> None:
    from finsight.infrastructure.storage.sqlite.migrations import (
        get_migration_status,
        initialize_database,
    )

    async def run() -> bool:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Current version: {status.get('current_version') or 'N/A'}")
            print(f"Applied migrations: {status['applied_migrations']}")
            print(f"Pending migrations: {status['pending_migrations']}")
            print(f"Missing tables: {status['missing_tables']}")
            return True

        results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
        if not results:
            print("Database is up to date.")
        for result in results:
            label = "SUCCESS" if result.success else "FAILED"
            print(f"[{label}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
            if result.error:
                print(f"         Error: {result.error}")
        return all(r.success for r in results)

    if not asyncio.run(run()):
        sys.exit(1)


def _print_insight(insight, verbose: bool) -> None:
    print(RULE)
    print("INSIGHTS SUMMARY")
    print(RULE)
    print(f"\n{insight.monthly_summary}\n")

    if insight.category_insights:
        print("Category Insights:")
        for index, cat in enumerate(insight.category_insights, start=1):
            print(f"   {index}. {cat.category}: {cat.total_spent:.2f} ({cat.percentage_of_total:.1f}%)")
            if verbose:
                print(f"      {cat.insight}")
        print()

    if insight.spending_spikes:
        print("Spending Alerts:")
        for index, spike in enumerate(insight.spending_spikes, start=1):
            print(f"   {index}. {spike.date} - {spike.category}: {spike.amount:.2f}")
            if verbose:
                print(f"      {spike.description}")
        print()

    if insight.recommendations:
        print("Recommendations:")
        for index, recommendation in enumerate(insight.recommendations, start=1):
            print(f"   {index}. {recommendation}")
        print()

    if insight.projections:
        projections = insight.projections
        print("Projections:")
        print(f"   Next Week: {projections.next_week:.2f}")
        print(f"   Next Month: {projections.next_month:.2f}")
        print(f"   Confidence: {projections.confidence.value.upper()}")
        if verbose:
            print(f"   {projections.explanation}")
        print()

    print(RULE)
    print(f"Insights stored with ID: {insight.id}")


def cmd_generate_insights(args: argparse.Namespace) -> None:
    from finsight.application.services import get_insight_generator
    from finsight.config import configure_logging, get_settings
    from finsight.core.entities import InsightPeriod, TransactionFilters
    from finsight.core.exceptions import ConfigurationError, FinsightError
    from finsight.infrastructure.llm import validate_llm_settings
    from finsight.infrastructure.storage.sqlite import (
        SQLiteSettingsStore,
        SQLiteTransactionStore,
        close_pool,
    )
    from finsight.infrastructure.storage.sqlite.migrations import initialize_database

    if args.verbose:
        configure_logging()

    end = date.today()
    period = InsightPeriod(start=end - timedelta(days=args.days), end=end)

    async def run() -> int:
        await initialize_database(create_backup_before=False)
        try:
            print("Finsight Insights Generator")
            print(RULE)
            print(f"User: {args.user_id}")
            print(f"Period: {period.start} to {period.end} ({args.days} days)")

            transactions = await SQLiteTransactionStore().find_transactions(
                args.user_id,
                TransactionFilters(start_date=period.start, end_date=period.end),
            )
            if not transactions:
                print("No transactions found for this period. Cannot generate insights.")
                return 0
            print(f"Found {len(transactions)} transactions")

            user_settings = await SQLiteSettingsStore().get_user_settings(args.user_id)
            print(f"Currency: {user_settings.currency.value}")

            llm = get_settings().llm
            try:
                validate_llm_settings(llm)
            except ConfigurationError as e:
                print(f"Failed to initialize model gateway: {e.message}")
                print("Set LLM_PROVIDER (openai or anthropic) and the matching API key:")
                print("   LLM_OPENAI_API_KEY or LLM_ANTHROPIC_API_KEY")
                return 1
            if args.verbose:
                print(f"Model gateway ready (provider: {llm.provider}, model: {llm.model_name})")

            print("\nGenerating insights... this may take 10-30 seconds")
            start_time = time.time()
            try:
                insight = await get_insight_generator().generate(args.user_id, period)
            except FinsightError as e:
                print(f"\nError generating insights: {e.message}")
                if args.verbose:
                    print(f"Details: {e.details}")
                print("\nTroubleshooting tips:")
                print("   - Verify your LLM API key is valid")
                print("   - Check your internet connection")
                print("   - Try running with --verbose for more details")
                return 1

            print(f"\nInsights ready ({time.time() - start_time:.2f}s)")
            _print_insight(insight, args.verbose)
            return 0
        finally:
            await close_pool()

    sys.exit(asyncio.run(run()))


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from finsight.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "finsight.api.main:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
        reload=args.reload or settings.api.debug,
    )


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Finsight management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # migrate
    p_migrate = sub.add_parser("migrate", help="Apply database migrations")
    p_migrate.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    p_migrate.add_argument("--status", action="store_true", help="Show migration status only")
    p_migrate.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    p_migrate.set_defaults(func=cmd_migrate)

    # generate-insights
    p_generate = sub.add_parser("generate-insights", help="Generate insights for a user")
    p_generate.add_argument("--user-id", required=True, help="User to generate insights for")
    p_generate.add_argument("--days", type=int, default=30, help="Days to analyze (default: 30)")
    p_generate.add_argument("-v", "--verbose", action="store_true", help="Verbose output and logs")
    p_generate.set_defaults(func=cmd_generate_insights)

    # serve
    p_serve = sub.add_parser("serve", help="Start the API server")
    p_serve.add_argument("--host", help="Bind host (default from API_HOST)")
    p_serve.add_argument("--port", type=int, help="Bind port (default from API_PORT)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
