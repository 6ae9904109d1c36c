"""
Dartboard number layout.
"""
from typing import Tuple

# Official sector sequence (clockwise from top)
SECTOR_SEQUENCE = (20, 1, 18, 4, 13, 6, 10, 15, 2, 17,
                   3, 19, 7, 16, 8, 11, 14, 9, 12, 5)


def sector_neighbors(number: int) -> Tuple[int, int]:
    """
    Get the numbers on either side of a sector.

    Args:
        number: Board number (1-20)

    Returns:
        (anticlockwise, clockwise) neighbours, e.g. 20 -> (5, 1)

    Raises:
        ValueError: If number is not on the board
    """
    if number not in SECTOR_SEQUENCE:
        raise ValueError(f"Not a board number: {number}")

    idx = SECTOR_SEQUENCE.index(number)
    count = len(SECTOR_SEQUENCE)
    return (
        SECTOR_SEQUENCE[(idx - 1) % count],
        SECTOR_SEQUENCE[(idx + 1) % count],
    )
