# src/cli/runner.py

"""Headless CLI search runner on top of the async aggregator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.services.errors import InvalidQueryError, UpstreamError
from src.services.health_checker import HealthChecker
from src.services.offer_aggregator import (
    AggregationResult,
    OfferAggregator,
    build_clients,
)

logger = logging.getLogger("whisky_offers.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2


def resolve_sources(
    source_csv: str | None,
) -> list[dict[str, str]]:
    """Map a comma-separated list of source IDs to their config dicts.

    Returns all sources when *source_csv* is ``None``.
    Raises ``SystemExit`` on unknown IDs.
    """
    available = {
        s["id"]: s for s in Settings.AVAILABLE_SOURCES
    }
    if source_csv is None:
        return Settings.AVAILABLE_SOURCES

    requested = [
        s.strip() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in available]
    if unknown:
        valid = ", ".join(sorted(available))
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(EXIT_BAD_INPUT)

    return [available[r] for r in requested]


def _format_price(price: int | None) -> str:
    return f"¥{price:,}" if price is not None else "N/A"


def _print_table(result: AggregationResult) -> None:
    """Render a Rich table of ranked offer groups to stdout."""
    table = Table(
        title=f"Offers for '{result.query}'",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Offers", justify="center")
    table.add_column("Source", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, group in enumerate(result.items, 1):
        cheapest = group.representative
        table.add_row(
            str(idx),
            cheapest.title[:60],
            _format_price(cheapest.price),
            str(len(group.members)),
            cheapest.source,
            cheapest.url or "",
        )

    Console().print(table)


async def cli_search(
    query: str,
    budget: int | None,
    source_csv: str | None,
    output_format: str,
) -> int:
    """Run a headless search and return an exit code.

    0 = results printed, 1 = no results or every source failed,
    2 = invalid input.
    """
    sources = resolve_sources(source_csv)
    aggregator = OfferAggregator(clients=build_clients(sources))

    source_labels = ", ".join(s["label"] for s in sources)
    budget_note = f" budget=¥{budget:,}" if budget else ""
    _err.print(
        f"[bold]Searching:[/bold] {query}  "
        f"[dim]sources={source_labels}{budget_note}[/dim]"
    )

    try:
        result = await aggregator.aggregate(query, budget)
    except InvalidQueryError as exc:
        _err.print(f"[red]Invalid request: {exc}[/red]")
        return EXIT_BAD_INPUT
    except UpstreamError as exc:
        logger.error("Search failed: %s", exc)
        _err.print(f"[red]All marketplaces failed: {exc.reason}[/red]")
        return EXIT_FAILED
    finally:
        aggregator.close()

    for failure in result.failed_sources:
        _err.print(
            f"[yellow]Source {failure.source} unavailable: "
            f"{failure.reason}[/yellow]"
        )

    if not result.items:
        _err.print("[yellow]No offers found.[/yellow]")
        return EXIT_FAILED

    _err.print(
        f"[green]✓ {len(result.items)} of {result.group_count} products"
        f" from {result.total_listings} listings"
        f" ({result.rejected_count} filtered)[/green]"
    )

    if output_format == "table":
        _print_table(result)
    else:
        json.dump(
            result.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return EXIT_OK


_STATUS_MARKUP = {
    "ok": "[green]OK[/green]",
    "slow": "[yellow]SLOW[/yellow]",
    "down": "[red]DOWN[/red]",
}


async def run_health_check() -> int:
    """Probe every marketplace and print one row per source.

    Returns 1 when any source is down.
    """
    _err.print("[bold]Probing marketplaces...[/bold]")
    results = await HealthChecker().check_all()

    table = Table(title="Marketplace health", title_style="bold cyan")
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")
    for r in results:
        table.add_row(
            r.source_id,
            _STATUS_MARKUP.get(r.status, r.status),
            f"{r.latency_ms:.0f}ms" if r.latency_ms else "-",
            r.message,
        )
    Console().print(table)

    return EXIT_FAILED if any(r.is_down for r in results) else EXIT_OK
