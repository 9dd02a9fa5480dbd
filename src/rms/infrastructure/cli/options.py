"""Parameter helpers shared by the CLI command modules."""

from __future__ import annotations

from datetime import date

import click

from rms.application.dto import RentalItemSpec


def parse_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{raw}'. Expected YYYY-MM-DD.")


def parse_items(raw: str) -> list[RentalItemSpec]:
    """Parse '1:2:2025-06-01:2025-06-05,3:1:...' into RentalItemSpec list.

    Each item is ``ProductId:Qty:Start:End``.
    """
    specs: list[RentalItemSpec] = []
    for chunk in raw.split(","):
        parts = chunk.strip().split(":")
        if len(parts) != 4:
            raise click.BadParameter(
                f"Invalid item format '{chunk}'. Expected 'ProductId:Qty:Start:End'."
            )
        product_id, qty_str, start, end = (p.strip() for p in parts)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(
            RentalItemSpec(
                product_id=product_id,
                quantity=qty,
                start=parse_date(start),
                end=parse_date(end),
            )
        )
    return specs


def period_options(func):
    """Attach ``--start`` and ``--end`` ISO date options."""
    func = click.option("--end", required=True, help="First day after the rental (YYYY-MM-DD).")(func)
    func = click.option("--start", required=True, help="First rental day (YYYY-MM-DD).")(func)
    return func
