import logging
import numbers
from typing import Any, Dict

from quodyssey.errors import InvalidPayloadError
from quodyssey.models import (
    ANSWER_LETTERS,
    ChoiceAnswer,
    ChoiceResult,
    EstimateAnswer,
    EstimateResult,
    OpenAnswer,
    OpenResult,
)
from .edit_distance import is_within_distance

logger = logging.getLogger(__name__)


class AnswerGrader:
    """Validates answers and grades them against the server's round result.

    Choice answers are exact letter matches, estimates must be within
    ``estimate_tolerance`` of the true value, open answers are matched with a
    bounded edit distance of ``max_edit_distance``.
    """

    def __init__(self, max_edit_distance: int = 2, estimate_tolerance: float = 0.1):
        self.max_edit_distance = max_edit_distance
        self.estimate_tolerance = estimate_tolerance

    def validate(self, answer) -> None:
        if isinstance(answer, ChoiceAnswer):
            idx = answer.index
            if not isinstance(idx, int) or isinstance(idx, bool) or not 0 <= idx < len(ANSWER_LETTERS):
                raise InvalidPayloadError(f'Invalid answer idx {idx!r}')
        elif isinstance(answer, EstimateAnswer):
            if not isinstance(answer.value, numbers.Real) or isinstance(answer.value, bool):
                raise InvalidPayloadError('Estimation questions need to be answered with numbers')
        elif isinstance(answer, OpenAnswer):
            if not isinstance(answer.text, str):
                raise InvalidPayloadError('Open questions need to be answered with strings')
        else:
            raise InvalidPayloadError(f'Unknown answer type {type(answer).__name__}')

    def wire_answer(self, answer) -> Any:
        """The value sent as ``answer`` in the ``answer`` request."""
        if isinstance(answer, ChoiceAnswer):
            return ANSWER_LETTERS[answer.index]
        if isinstance(answer, EstimateAnswer):
            return answer.value
        if isinstance(answer, OpenAnswer):
            return answer.text
        raise TypeError(f'Unhandled answer {answer!r}')

    def grade(self, answer, result: Dict[str, Any]):
        if isinstance(answer, ChoiceAnswer):
            return self._grade_choice(answer, result)
        if isinstance(answer, EstimateAnswer):
            return self._grade_estimate(answer, result)
        if isinstance(answer, OpenAnswer):
            return self._grade_open(answer, result)
        raise TypeError(f'Unhandled answer {answer!r}')

    def _grade_choice(self, answer: ChoiceAnswer, result: Dict[str, Any]) -> ChoiceResult:
        letter = ANSWER_LETTERS[answer.index]
        correct_letter = result.get('answer')
        counts = result.get('result') or {}
        solution = ANSWER_LETTERS.index(correct_letter) if correct_letter in ANSWER_LETTERS else None
        return ChoiceResult(
            success=correct_letter == letter,
            solution=solution,
            distribution=[counts.get(k) for k in ANSWER_LETTERS],
        )

    def _grade_estimate(self, answer: EstimateAnswer, result: Dict[str, Any]) -> EstimateResult:
        exact = result.get('answer')
        aggregate = result.get('result') or {}
        hi, lo = aggregate.get('max'), aggregate.get('min')
        # Offset of the spread, not a mean; clients display this value as-is
        avg = 0.5 * (hi - lo) if hi is not None and lo is not None else None
        return EstimateResult(
            success=exact is not None and abs(exact - answer.value) < exact * self.estimate_tolerance,
            solution=exact,
            max=hi,
            min=lo,
            avg=avg,
        )

    def _grade_open(self, answer: OpenAnswer, result: Dict[str, Any]) -> OpenResult:
        correct = result.get('answer')
        success = correct is not None and is_within_distance(correct, answer.text, self.max_edit_distance)
        stats = {k: v for k, v in result.items() if k != 'answer'}
        logger.debug(f"[grade-open] correct={correct!r} given={answer.text!r} success={success}")
        return OpenResult(success=success, correct_answer=correct, stats=stats)
