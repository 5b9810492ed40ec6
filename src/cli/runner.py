# src/cli/runner.py

"""Headless runners for the sync job and the single-EAN check."""

import asyncio
import logging

from rich.console import Console
from rich.table import Table

from src.clients.store_client import StoreClient
from src.config.settings import Settings, SyncConfig
from src.feeds.offer_feed import OfferFeedLoader
from src.feeds.shopping_feed import ShoppingFeedLoader
from src.filters.ean_filter import EanAllowList
from src.models.change import ChangeRecord, ProductDecision
from src.models.feed_entry import OfferFeedIndex, ShoppingFeedIndex
from src.models.product import ProductIndex
from src.services.change_applicator import ApplyReport, ChangeApplicator
from src.services.ean_inspector import EanInspection, EanInspector
from src.services.reconciler import ReconciliationResult, reconcile
from src.storage.report_writer import ReportWriter

logger = logging.getLogger("stock_sync.cli")

# Status and summaries go to stderr; the change table goes to stdout
_err = Console(stderr=True)


def _fmt_qty(qty: int | None) -> str:
    return "n/a" if qty is None else str(qty)


def _print_sources(
    products: ProductIndex,
    stock_count: int,
    offers: OfferFeedIndex,
    shopping: ShoppingFeedIndex,
) -> None:
    """Counts gathered while loading the three sources."""
    _err.print(f"Products with EAN: {len(products.by_ean)}")
    _err.print(f"Products without EAN: {len(products.without_ean)}")
    if products.duplicated_eans:
        _err.print(
            f"[yellow]Duplicated EANs in store: "
            f"{len(products.duplicated_eans)}[/yellow]"
        )
    _err.print(f"Stock records: {stock_count}")
    _err.print(f"Offer feed offers: {offers.total_offers}")
    _err.print(f"Offer feed distinct EANs: {len(offers.by_ean)}")
    if offers.duplicated_eans:
        _err.print(
            f"[yellow]Duplicated EANs in offer feed: "
            f"{len(offers.duplicated_eans)}[/yellow]"
        )
    _err.print(f"Shopping feed items: {shopping.total_items}")
    _err.print(f"Shopping feed distinct EANs: {len(shopping.by_ean)}")


def _print_changes(changes: list[ChangeRecord], limit: int) -> None:
    """Render the first *limit* changes as a Rich table."""
    table = Table(
        title=f"Sample changes (max {limit})",
        title_style="bold cyan",
    )
    table.add_column("EAN")
    table.add_column("Product", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Target", justify="right", style="green")
    table.add_column("Source", style="magenta")

    for c in changes[:limit]:
        table.add_row(
            c.ean,
            str(c.product_id),
            str(c.current_qty),
            str(c.target_qty),
            c.source.value,
        )
    Console().print(table)


def _print_bucket(
    title: str, decisions: list[ProductDecision], limit: int,
) -> None:
    if not decisions:
        return
    _err.print(f"\n[bold]{title} (max {limit}):[/bold]")
    for d in decisions[:limit]:
        _err.print(
            f"EAN {d.ean} | product {d.product_id} | "
            f"current = {_fmt_qty(d.current_qty)} -> "
            f"target = {d.target_qty} | source={d.source.value}"
        )


def _print_summary(result: ReconciliationResult) -> None:
    """Counts, sample changes and sample entries of each bucket."""
    settings = Settings()
    _err.print("\n[bold]--- Summary ---[/bold]")
    _err.print(f"Products that would change: {len(result.changes)}")
    _err.print(
        f"Products not in offer feed: {len(result.not_in_offer_feed)}"
    )
    _err.print(
        f"Offer feed EANs with no catalog product: "
        f"{len(result.orphan_offers)}"
    )
    _err.print(f"Products using offer feed: {result.used_offer_feed}")
    _err.print(f"Products using shopping feed: {result.used_shopping_feed}")
    _err.print(f"Products with no source (target 0): {result.used_none}")

    if result.changes:
        _print_changes(result.changes, settings.SAMPLE_CHANGES)

    _print_bucket(
        "Products not in offer feed",
        result.not_in_offer_feed,
        settings.SAMPLE_BUCKET,
    )
    _print_bucket(
        "Products sourced from shopping feed",
        result.from_shopping_feed,
        settings.SAMPLE_BUCKET,
    )
    _print_bucket(
        "Products with no source",
        result.no_source,
        settings.SAMPLE_BUCKET,
    )

    if result.orphan_offers:
        _err.print(
            f"\n[bold]Offer feed EANs with no catalog product "
            f"(max {settings.SAMPLE_BUCKET}):[/bold]"
        )
        for o in result.orphan_offers[: settings.SAMPLE_BUCKET]:
            _err.print(
                f"EAN {o.ean} | feed stock = {o.feed_qty} | "
                f"shop stock = {o.shop_qty}"
            )


def _print_apply(report: ApplyReport, max_updates: int) -> None:
    if report.dry_run:
        _err.print(
            f"\n[yellow]Dry-run: no changes sent to the store "
            f"({report.would_change} would be applied).[/yellow]"
        )
        return

    _err.print(
        f"\n[green]✓ Updated {len(report.updated)}[/green]"
        f" of {report.attempted} attempted (max {max_updates})"
    )
    for c in report.updated:
        _err.print(
            f"OK: product {c.product_id} (EAN {c.ean}) "
            f"qty {c.current_qty} -> {c.target_qty}"
        )
    for c in report.skipped_no_stock:
        _err.print(
            f"[dim]Skipped: no stock record for product {c.product_id} "
            f"(EAN {c.ean})[/dim]"
        )
    for c in report.skipped_no_field:
        _err.print(
            f"[yellow]Skipped: no quantity field for product "
            f"{c.product_id} (EAN {c.ean})[/yellow]"
        )
    for c, error in report.failed:
        _err.print(
            f"[red]Failed: product {c.product_id} (EAN {c.ean}): "
            f"{error}[/red]"
        )
    if report.overflow:
        _err.print(
            f"[yellow]{report.would_change} changes computed, "
            f"only the first {max_updates} applied "
            f"({report.overflow} left over).[/yellow]"
        )


async def run_sync(config: SyncConfig, save_report: bool = False) -> int:
    """Run one reconciliation pass and return an exit code (0=ok, 1=fail).

    Sources are loaded one after another; any failure while loading
    aborts the run before anything is written.
    """
    store = StoreClient(config)
    offer_loader = OfferFeedLoader(config)
    shopping_loader = ShoppingFeedLoader(config)

    mode = "APPLY" if config.apply_changes else "DRY-RUN"
    _err.print(f"[bold]--- Stock sync ({mode}) ---[/bold]")

    try:
        _err.print("Fetching products...")
        products = await asyncio.to_thread(store.list_products_with_ean)
        _err.print("Fetching stock records...")
        stock = await asyncio.to_thread(store.stock_by_product_id)
        _err.print("Loading offer feed...")
        offers = await asyncio.to_thread(offer_loader.load)
        _err.print("Loading shopping feed...")
        shopping = await asyncio.to_thread(shopping_loader.load)

        _print_sources(products, len(stock), offers, shopping)

        result = reconcile(
            products, stock, offers, shopping, config.fallback_qty
        )
        _print_summary(result)

        final_changes, _excluded = EanAllowList.filter(
            result.changes, config.allowed_eans
        )
        if config.allowed_eans:
            _err.print(
                f"\nEAN allow-list {', '.join(config.allowed_eans)} "
                f"-> {len(final_changes)} changes selected."
            )

        applicator = ChangeApplicator(store, config)
        report = await asyncio.to_thread(
            applicator.apply, final_changes, stock
        )
        _print_apply(report, config.max_updates)

        if save_report:
            path = ReportWriter().save(result, final_changes, report)
            _err.print(f"[dim]Saved report → {path}[/dim]")
    except Exception as exc:
        logger.error("Sync run failed: %s", exc, exc_info=True)
        _err.print(f"[red]Run failed: {exc}[/red]")
        return 1

    _err.print("\n[bold]--- Done ---[/bold]")
    return 0


def _print_inspection(inspection: EanInspection) -> None:
    ean = inspection.ean

    _err.print(f"\n[bold]=== Store: EAN {ean} ===[/bold]")
    if not inspection.store_matches:
        _err.print("No store product with this EAN.")
    for match in inspection.store_matches:
        _err.print(
            f"Product id={match.product.id}, ean13={match.product.ean}"
        )
        if match.stock is None:
            _err.print("  No stock record for this product.")
        else:
            _err.print(
                f"  stock record id={match.stock.id}, "
                f"quantity={match.stock.quantity}"
            )

    _err.print(f"\n[bold]=== Offer feed: EAN {ean} ===[/bold]")
    offer = inspection.offer
    if inspection.offer_feed_error:
        _err.print(f"[red]{inspection.offer_feed_error}[/red]")
    elif offer is None:
        _err.print("No offer with this EAN.")
    else:
        _err.print(f"  id: {offer.offer_id}")
        _err.print(f"  name: {offer.name}")
        _err.print(f"  feed stock: {offer.feed_qty}")
        _err.print(
            f"  shop stock (feed - {Settings.OFFER_SAFETY_MARGIN}, min 0): "
            f"{offer.shop_qty}"
        )

    _err.print(f"\n[bold]=== Shopping feed: EAN {ean} ===[/bold]")
    item = inspection.shopping_item
    if inspection.shopping_feed_error:
        _err.print(f"[red]{inspection.shopping_feed_error}[/red]")
    elif item is None:
        _err.print("No item with this EAN.")
    else:
        _err.print(f"  title: {item.title}")
        _err.print(f"  link: {item.link}")
        _err.print(f"  availability: {item.availability}")
        _err.print(f"  price: {item.price}")


async def run_check_ean(config: SyncConfig) -> int:
    """Inspect ``config.test_ean`` in all sources; exit code 0/1."""
    ean = config.test_ean or ""
    _err.print(f"[bold]Checking EAN: {ean}[/bold]")

    inspector = EanInspector(
        StoreClient(config),
        OfferFeedLoader(config),
        ShoppingFeedLoader(config),
    )
    try:
        inspection = await inspector.inspect(ean)
    except Exception as exc:
        logger.error("EAN check failed: %s", exc, exc_info=True)
        _err.print(f"[red]Check failed: {exc}[/red]")
        return 1

    _print_inspection(inspection)
    _err.print("\n[bold]=== Done ===[/bold]")
    return 0
