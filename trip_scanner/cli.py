from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import click
from pydantic import ValidationError

from .airports import DEFAULT_SEARCH_LIMIT, default_directory
from .config import Settings, get_settings
from .flow import SearchFlow
from .formatters import format_duration, format_price, format_region, format_stops
from .recent_searches import RecentSearchStore
from .schemas import FlightSearchResponse, Region, SearchRequest
from .storage import SQLiteKeyValueStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file))
    logging.basicConfig(
        level=settings.log_level,
        handlers=handlers,
        format=LOG_FORMAT,
    )


def open_store(settings: Settings) -> RecentSearchStore:
    store = RecentSearchStore(
        SQLiteKeyValueStore(settings.db_path),
        key=settings.storage_key,
        capacity=settings.max_recent_searches,
    )
    store.restore()
    return store


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Find the cheapest departure airport for a destination."""
    settings = get_settings()
    configure_logging(settings)
    ctx.obj = settings


# ────────────────────────────────────────────────────────────────
# Airports
# ────────────────────────────────────────────────────────────────


@cli.group()
def airports() -> None:
    """Browse the airport directory."""


@airports.command("search")
@click.argument("query")
@click.option("--limit", type=int, default=DEFAULT_SEARCH_LIMIT, show_default=True)
def search_airports(query: str, limit: int) -> None:
    """List airports matching QUERY by code, city, name or country."""
    matches = default_directory().search(query, limit)
    if not matches:
        click.echo("No airports found")
        return
    for airport in matches:
        click.echo(f"{airport.code}  {airport.name} ({airport.city}, {airport.country})")


@airports.command("lookup")
@click.argument("code")
def lookup_airport(code: str) -> None:
    """Show the airport registered under CODE."""
    airport = default_directory().lookup(code)
    if airport is None:
        click.echo(f"Unknown airport code: {code.upper()}")
        return
    click.echo(f"{airport.code}  {airport.name} ({airport.city}, {airport.country})")


# ────────────────────────────────────────────────────────────────
# Recent searches
# ────────────────────────────────────────────────────────────────


@cli.group()
def recent() -> None:
    """Inspect the recent-search history."""


@recent.command("list")
@click.pass_obj
def list_recent(settings: Settings) -> None:
    store = open_store(settings)
    if not store.searches:
        click.echo("No recent searches")
        return
    for search in store.searches:
        when = datetime.fromtimestamp(search.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        line = f"{search.destination} from {format_region(search.region)} ({when})"
        if search.is_enriched:
            price = format_price(search.cheapest_price.amount, search.cheapest_price.currency)
            line += f" | from {price} via {search.cheapest_origin}, {search.results_count} results"
        click.echo(line)


@recent.command("clear")
@click.pass_obj
def clear_recent(settings: Settings) -> None:
    open_store(settings).clear()
    click.echo("Recent searches cleared")


# ────────────────────────────────────────────────────────────────
# Results
# ────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("destination")
@click.argument("payload", type=click.File("r", encoding="utf-8"))
@click.option(
    "--region",
    type=click.Choice([r.value for r in Region], case_sensitive=False),
    default=Region.EUROPE.value,
    show_default=True,
)
@click.option("--max-results", type=int, default=10, show_default=True)
@click.option("--departure-date", help="Departure date (YYYY-MM-DD)")
@click.option("--return-date", help="Return date (YYYY-MM-DD)")
@click.pass_obj
def results(
    settings: Settings,
    destination: str,
    payload,
    region: str,
    max_results: int,
    departure_date: Optional[str],
    return_date: Optional[str],
) -> None:
    """Record a search for DESTINATION and summarize the PAYLOAD result set."""
    try:
        request = SearchRequest(
            destination=destination,
            region=region,
            max_results=max_results,
            departure_date=departure_date,
            return_date=return_date,
        )
        response = FlightSearchResponse.model_validate_json(payload.read())
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc

    flow = SearchFlow(open_store(settings))
    flow.submit(request)
    view = flow.complete(request, response)

    click.echo(f"Flights to {view.destination_label} from {format_region(request.region)}")
    if view.statistics is None:
        click.echo("No flights found")
        return

    click.echo(
        f"Best price: {format_price(view.statistics.cheapest, view.currency)} | "
        f"Avg: {format_price(view.statistics.average, view.currency)}"
    )
    for rank, offer in enumerate(response.results, start=1):
        click.echo(
            f"{rank:>2}. {offer.origin} {offer.city}  "
            f"{format_price(offer.price, view.currency)}  "
            f"{format_stops(offer.stops)}  {format_duration(offer.duration_minutes)}"
        )
    for group in view.cities:
        click.echo(f"{group.city}: {group.count} airport(s) ({', '.join(group.origins)})")
    if view.map_points.unresolved:
        click.echo(
            f"{view.map_points.missing_count} offer(s) missing location data: "
            f"{', '.join(view.map_points.unresolved)}"
        )


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
