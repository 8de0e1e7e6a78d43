"""Proportional allocation of output slots across weighted categories."""

from __future__ import annotations

import math
from collections.abc import Mapping

MAX_WEIGHT = 5


def allocate_by_category_weights(weights: Mapping[str, int], total: int) -> dict[str, int]:
    """Split ``total`` slots across categories in proportion to their weights.

    Weights are clamped to 0-5. Categories are visited heaviest first (ties
    keep input order); each gets ``ceil(total * w / sum)`` capped at what is
    left, except the last positive-weight category, which takes the whole
    remainder. Rounding slack therefore always lands on that last category.
    Zero-weight categories get 0. With any positive weight the counts sum to
    exactly ``total`` (0 when ``total`` is not positive).
    """
    clamped = {cid: max(0, min(MAX_WEIGHT, int(w))) for cid, w in weights.items()}
    allocation = {cid: 0 for cid in clamped}

    weight_sum = sum(clamped.values())
    if weight_sum == 0 or total <= 0:
        return allocation

    ordered = sorted(
        (cid for cid, w in clamped.items() if w > 0), key=lambda cid: clamped[cid], reverse=True
    )
    remaining = total
    for i, cid in enumerate(ordered):
        if i == len(ordered) - 1:
            count = remaining
        else:
            count = min(math.ceil(total * clamped[cid] / weight_sum), remaining)
        allocation[cid] = count
        remaining -= count

    return {cid: allocation[cid] for cid in _heaviest_first(clamped)}


def _heaviest_first(weights: dict[str, int]) -> list[str]:
    return sorted(weights, key=lambda cid: weights[cid], reverse=True)
