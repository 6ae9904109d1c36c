"""
X01 scoring rules shared by the match engine and the bot.
"""
from dartcoach.core import Throw


def is_bust(remaining: int, throw: Throw, double_out: bool = True) -> bool:
    """
    Check whether a throw busts the visit.

    Args:
        remaining: Score left after the throw
        throw: The throw that produced it
        double_out: Whether the leg must end on a double or the bull

    Returns:
        True if the visit is void
    """
    if remaining < 0:
        return True
    if not double_out:
        return False
    if remaining == 1:
        return True
    return remaining == 0 and not throw.is_finishing_double


def counted_value(
        throw: Throw,
        score_left: int,
        start_score: int,
        double_in: bool = False
) -> int:
    """
    Points a throw takes off the score.

    With double-in, nothing counts until the player opens with a double
    (or the bull) while still standing on the start score.
    """
    if double_in and score_left == start_score and not throw.is_finishing_double:
        return 0
    return throw.value
