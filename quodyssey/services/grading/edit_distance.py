import math
from typing import Iterable, Union


def _normalize(value) -> str:
    return str(value).strip().lower()


def _distance(correct: str, answer: str, i: int, j: int, remainder: int) -> float:
    if j == len(answer):
        return len(correct) - i
    if i == len(correct):
        return len(answer) - j
    if correct[i] == answer[j]:
        return _distance(correct, answer, i + 1, j + 1, remainder)
    # Out of budget: nothing below this branch can be within the limit
    if remainder < 0:
        return math.inf
    delete = 1 + _distance(correct, answer, i + 1, j, remainder - 1)
    insert = 1 + _distance(correct, answer, i, j + 1, remainder - 1)
    replace = 1 + _distance(correct, answer, i + 1, j + 1, remainder - 1)
    return min(delete, insert, replace)


def edit_distance(correct: str, answer: str, max_distance: int = 0) -> float:
    """Edit distance between two normalized strings, pruned at ``max_distance``.

    The result is exact whenever it is within the budget. Branches that run
    out of budget return ``math.inf``, so a larger value only tells you the
    strings are too far apart.
    """
    if max_distance < 0:
        raise ValueError('max_distance must be non-negative')
    return _distance(_normalize(correct), _normalize(answer), 0, 0, max_distance)


def is_within_distance(correct: Union[str, Iterable[str]], answer: str, max_distance: int = 0) -> bool:
    """True if ``answer`` is at most ``max_distance`` edits away from ``correct``.

    Comparison ignores case and surrounding whitespace. ``correct`` may be a
    collection of acceptable answers, in which case any one of them matching
    is enough.
    """
    if isinstance(correct, str):
        return edit_distance(correct, answer, max_distance) <= max_distance
    return any(edit_distance(c, answer, max_distance) <= max_distance for c in correct)
