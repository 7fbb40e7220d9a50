"""Heuristic repair pricing for the materials the model lists.

Prices are per stated unit (bag, piece, hour, ...) and are only a rough guide.
"""
import math
import re
from collections.abc import Iterable

from floodscout.schemas.analysis import RepairEstimate

# Lookup order matters: the first key found inside the material name wins.
MATERIAL_COSTS: dict[str, float] = {
    "cement": 12,  # bag
    "bricks": 2.5,  # unit
    "steel rods": 25,  # piece
    "wood planks": 18,  # piece
    "labor": 120,  # hour
    "sand": 18,  # bag
    "gravel": 14,  # bag
    "paint": 60,  # liter
    "plumbing": 350,  # item
    "electrical": 300,  # item
    "drywall": 40,  # sheet
    "flooring": 25,  # sq-ft
    "garage door": 1200,  # unit
}

DEFAULT_UNIT_COST: float = 250

_QUANTITY_PATTERN = re.compile(r"\d+(\.\d+)?")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def unit_cost_for(material: str) -> float:
    material_lower = material.lower()
    for key, cost in MATERIAL_COSTS.items():
        if key in material_lower:
            return cost
    return DEFAULT_UNIT_COST


def parse_quantity(quantity_text: str) -> float:
    match = _QUANTITY_PATTERN.search(quantity_text)
    return float(match.group(0)) if match else 1.0


def estimate_cost(material: str, quantity_text: str) -> int:
    """Price a repair line item.

    Unknown materials fall back to DEFAULT_UNIT_COST and a quantity without
    any number counts as 1, so this never raises on odd model output.
    """
    return round_half_up(parse_quantity(quantity_text) * unit_cost_for(material))


def total_cost(estimates: Iterable[RepairEstimate]) -> int:
    return sum(estimate_cost(e.material, e.estimated_quantity) for e in estimates)
