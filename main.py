#!/usr/bin/env python3
"""
Purchase Entry — CLI entry point.

Usage examples:
  python main.py check                              # Show settings and catalog status
  python main.py record draft.json                  # Validate and record a draft purchase
  python main.py record draft.json --delay 0        # Skip the simulated backend delay
  python main.py record draft.json --fail "offline" # Simulate a backend failure
  python main.py suggest supplier "acme"            # Type-ahead suggestions
  python main.py suggest product "paracet"

Draft file format (JSON):
  {
    "supplier_name": "Acme Pharma", "purchase_date": "2024-05-01",
    "payment_mode": "UPI", "paid_amount": "500", "notes": "",
    "items": [{"product_name": "...", "quantity": "2", "cost_price": "100",
               "mrp": "", "batch_no": "", "expiry_date": "2025-12-31"}]
  }
"""
import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from config import Config
from models.line_item import ITEM_FIELDS
from models.purchase_order import METADATA_FIELDS
from purchasing.calculator import format_money, item_total_display
from purchasing.catalog import CatalogLookup
from purchasing.controller import OrderFormController
from purchasing.gateway import SimulatedGateway
from purchasing.notices import render_failure_notice, render_success_notice, total_line


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )


def load_draft(controller: OrderFormController, draft: dict) -> None:
    """Replay a draft purchase into *controller* as a sequence of edit commands."""
    for field in METADATA_FIELDS:
        if field in draft and draft[field] is not None:
            controller.update_metadata_field(field, draft[field])

    rows = draft.get("items") or []
    for position, row in enumerate(rows):
        item_id = controller.order.items[0].id if position == 0 else controller.add_item()
        for field in ITEM_FIELDS:
            if field in row and row[field] is not None:
                controller.update_item(item_id, field, row[field])


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Purchase Entry — validate, total, and record stock purchases."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)


# --------------------------------------------------------------------
# check command
# --------------------------------------------------------------------

@cli.command()
def check() -> None:
    """Show the effective settings and whether the catalogs are loaded."""
    config = Config()
    catalog = CatalogLookup.from_config(config)

    click.echo("\n=== Purchase Entry Setup ===\n")
    click.echo(f"  Currency symbol:      {config.currency_symbol}")
    click.echo(f"  Default payment mode: {config.default_payment_mode}")
    click.echo(f"  Simulated delay:      {config.simulated_delay_seconds:g}s")
    timeout = f"{config.gateway_timeout_seconds:g}s" if config.gateway_timeout else "disabled"
    click.echo(f"  Gateway timeout:      {timeout}")
    click.echo()
    for label, path, entries in [
        ("suppliers.csv", config.suppliers_csv, catalog.suppliers),
        ("products.csv", config.products_csv, catalog.products),
    ]:
        tick = "✓" if path.exists() else "✗"
        count_str = f" ({len(entries)} loaded)" if path.exists() else " (file not found)"
        click.echo(f"  {label:<20} {tick}{count_str}")
        if not path.exists():
            click.echo(f"     → Expected at: {path}")
    click.echo()


# --------------------------------------------------------------------
# record command
# --------------------------------------------------------------------

@cli.command()
@click.argument("draft_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--delay", default=None, type=float, help="Simulated backend delay in seconds")
@click.option("--fail", "fail_with", default=None, help="Make the simulated backend fail with this message")
def record(draft_file: str, delay: float | None, fail_with: str | None) -> None:
    """Validate DRAFT_FILE and record it through the simulated backend."""
    config = Config()
    if delay is not None:
        config.simulated_delay_seconds = delay

    try:
        draft = json.loads(Path(draft_file).read_text(encoding="utf-8"))
    except ValueError as exc:
        click.echo(f"Error: '{draft_file}' is not valid JSON ({exc}).", err=True)
        sys.exit(1)

    gateway = SimulatedGateway(delay_seconds=config.simulated_delay_seconds, fail_with=fail_with)
    controller = OrderFormController(gateway, config)
    try:
        load_draft(controller, draft)
    except ValueError as exc:
        click.echo(f"Error: invalid draft ({exc}).", err=True)
        sys.exit(1)

    symbol = config.currency_symbol
    click.echo()
    for position, item in enumerate(controller.order.items, start=1):
        shown = item_total_display(item, symbol)
        click.echo(f"  Item {position}: {item.product_name or '(unnamed)'}"
                   + (f"  {shown}" if shown else ""))
    click.echo(f"  {total_line(controller.order_total, symbol)}")
    balance = controller.balance
    if balance:
        click.echo(f"  {balance.label}: {format_money(balance.amount, symbol)}")
    click.echo()

    item_count = len(controller.order.items)
    outcome = asyncio.run(controller.submit())

    if outcome.status == "invalid":
        click.echo(f"  Cannot record purchase — {outcome.error_count} field(s) need attention:")
        for key, message in controller.errors.items():
            where = f"Item {key.item_index + 1}: " if key.item_index is not None else ""
            click.echo(f"    ✗ {where}{message}")
        sys.exit(1)

    if outcome.status == "failed":
        click.echo(render_failure_notice(outcome.failure), err=True)
        sys.exit(1)

    template_file = config.config_dir / config.notice_template if config.notice_template else None
    click.echo(render_success_notice(outcome, item_count, symbol, template_file))


# --------------------------------------------------------------------
# suggest command
# --------------------------------------------------------------------

@cli.command()
@click.argument("kind", type=click.Choice(["supplier", "product"]))
@click.argument("query")
def suggest(kind: str, query: str) -> None:
    """Show catalog suggestions for a partially typed name."""
    config = Config()
    catalog = CatalogLookup.from_config(config)
    if kind == "supplier":
        suggestions = catalog.suggest_suppliers(query)
    else:
        suggestions = catalog.suggest_products(query)

    if not suggestions:
        click.echo(f"  No {kind} matches for '{query}'")
        return
    for s in suggestions:
        extra = ""
        if s.cost_price is not None:
            extra = f"  cost {format_money(s.cost_price, config.currency_symbol)}"
        click.echo(f"  {s.key:<12} {s.name}  ({s.score:.0%}){extra}")


if __name__ == "__main__":
    cli()
