"""
Checkout advisor.

Suggests the finishing path for a remaining score under double-out rules:
at most three darts, the last one a double or the bullseye.
"""
from typing import Dict, List, Optional, Tuple

from dartcoach.core import Throw

MAX_CHECKOUT = 170

# Preferred finishing doubles first; the bull is the last resort
FINISH_ORDER = (
    "D20", "D16", "D18", "D12", "D10", "D8", "D14", "D6", "D4", "D2",
    "D19", "D17", "D15", "D13", "D11", "D9", "D7", "D5", "D3", "D1",
    "BULL",
)

# Set-up darts, highest scoring kinds first
SETUP_ORDER = (
    tuple(f"T{n}" for n in range(20, 0, -1))
    + ("BULL", "25")
    + tuple(str(n) for n in range(20, 0, -1))
    + tuple(f"D{n}" for n in range(20, 0, -1))
)


def parse_target(label: str) -> Throw:
    """
    Convert a board label into the throw that hits it exactly.

    Accepted: T<n>, D<n>, S<n> or <n>, 25 / OUTER / SB, BULL / DB / 50,
    MISS / 0 (case-insensitive).

    Raises:
        ValueError: If the label does not name a board target
    """
    text = label.strip().upper()

    if text in ("MISS", "M", "0"):
        return Throw.miss()
    if text in ("BULL", "DB", "50"):
        return Throw(50, 1)
    if text in ("25", "OUTER", "SB"):
        return Throw(25, 1)

    prefix, digits = text[:1], text[1:]
    multiplier = {"T": 3, "D": 2, "S": 1}.get(prefix)
    if multiplier is None:
        prefix, digits, multiplier = "", text, 1

    if not digits.isdigit():
        raise ValueError(f"Unknown target: {label!r}")

    number = int(digits)
    if not (1 <= number <= 20 or (number == 25 and multiplier == 2)):
        raise ValueError(f"Unknown target: {label!r}")

    return Throw(number, multiplier)


def _build_table() -> Dict[int, Tuple[str, ...]]:
    """Enumerate one preferred path per finishable score, fewest darts first."""
    values = {label: parse_target(label).value for label in SETUP_ORDER + FINISH_ORDER}
    table: Dict[int, Tuple[str, ...]] = {}

    for last in FINISH_ORDER:
        table.setdefault(values[last], (last,))

    for last in FINISH_ORDER:
        for first in SETUP_ORDER:
            total = values[first] + values[last]
            if total <= MAX_CHECKOUT:
                table.setdefault(total, (first, last))

    for last in FINISH_ORDER:
        for first in SETUP_ORDER:
            for second in SETUP_ORDER:
                total = values[first] + values[second] + values[last]
                if total <= MAX_CHECKOUT and total not in table:
                    table[total] = (first, second, last)

    return table


CHECKOUT_TABLE = _build_table()


def advise_checkout(remaining: int) -> Optional[List[str]]:
    """
    Suggest a finishing path.

    Args:
        remaining: Score left

    Returns:
        Labels such as ["T20", "T20", "BULL"], or None when the score
        cannot be finished in three darts
    """
    path = CHECKOUT_TABLE.get(remaining)
    if path is None:
        return None
    return list(path)


def checkout_darts(remaining: int) -> Optional[int]:
    """Fewest darts needed to finish, or None."""
    path = CHECKOUT_TABLE.get(remaining)
    return len(path) if path else None
