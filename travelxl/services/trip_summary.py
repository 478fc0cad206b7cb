"""
Trip summary aggregation.

Totals a trip's receipts overall and per category.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import structlog

from travelxl.models import Receipt
from travelxl.services.numeric_parser import finite_or_zero

logger = structlog.get_logger(__name__)


@dataclass
class TripSummary:
    """Aggregated totals for a trip."""

    receipt_count: int
    total_eur: float
    # (category, total) pairs, largest first
    category_totals: List[Tuple[str, float]] = field(default_factory=list)
    attachments: int = 0


def summarize_receipts(receipts: Sequence[Receipt]) -> TripSummary:
    """
    Aggregate receipts into overall and per-category totals.

    Blank categories and zero costs do not appear in the category breakdown.
    Non-finite costs count as 0.

    Args:
        receipts: Receipts of one trip.

    Returns:
        TripSummary with totals.
    """
    sums: Dict[str, float] = {}

    for receipt in receipts:
        category = (receipt.category or "").strip()
        cost = finite_or_zero(receipt.cost_eur)
        if not category or cost == 0:
            continue
        sums[category] = sums.get(category, 0.0) + cost

    category_totals = sorted(sums.items(), key=lambda item: item[1], reverse=True)

    summary = TripSummary(
        receipt_count=len(receipts),
        total_eur=sum((finite_or_zero(r.cost_eur) for r in receipts), 0.0),
        category_totals=category_totals,
        attachments=sum(1 for r in receipts if r.has_attachment),
    )

    logger.debug(
        "Receipts summarized",
        receipts=summary.receipt_count,
        categories=len(category_totals),
    )

    return summary
