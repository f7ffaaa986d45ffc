from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from quodyssey.errors import InvalidPayloadError

QUESTION_TYPES = ('choice', 'estimate', 'open')
ANSWER_LETTERS = ('a', 'b', 'c', 'd')


@dataclass(frozen=True)
class Question:
    id: Any
    round: Any
    type: str
    prompt: str
    options: Tuple[str, ...]
    start_time: float
    end_time: float
    duration_ms: int = 0

    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise ValueError(f'Question {self.id} ends before it starts')

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], now: float) -> 'Question':
        """Build a question from a ``getq`` response (or a push announcement).

        ``payload['end']`` is the time left on the countdown in milliseconds,
        counted from the moment the payload was received. A countdown that
        already ran out (zero, negative or missing) gives an expired question.
        """
        raw = payload.get('question') or {}
        qtype = raw.get('type')
        options: Tuple[str, ...] = ()
        if qtype == 'choice':
            options = tuple(raw[k] for k in ANSWER_LETTERS if raw.get(k) is not None)
        try:
            duration_ms = int(payload.get('end') or 0)
        except (TypeError, ValueError):
            raise InvalidPayloadError(f"Question countdown is not a number: {payload.get('end')!r}")
        end_time = now + duration_ms / 1000.0
        return cls(
            id=raw.get('id'),
            round=payload.get('round'),
            type=qtype,
            prompt=raw.get('question', ''),
            options=options,
            # Expired on arrival: backdate the start so it still precedes the end
            start_time=min(now, end_time - 0.001),
            end_time=end_time,
            duration_ms=duration_ms,
        )

    def remaining_ms(self, now: float) -> int:
        return int(round((self.end_time - now) * 1000))

    def to_dict(self):
        return {
            'id': self.id,
            'round': self.round,
            'type': self.type,
            'prompt': self.prompt,
            'options': list(self.options),
            'duration_ms': self.duration_ms,
        }


# ---- Answers ----

@dataclass(frozen=True)
class ChoiceAnswer:
    index: Any
    type = 'choice'


@dataclass(frozen=True)
class EstimateAnswer:
    value: Any
    type = 'estimate'


@dataclass(frozen=True)
class OpenAnswer:
    text: Any
    type = 'open'


def answer_from_dict(data: Dict[str, Any]):
    """Accept ``{'type': 'choice', 'idx': 2}`` style answers."""
    atype = (data or {}).get('type')
    if atype == 'choice':
        return ChoiceAnswer(data.get('idx'))
    if atype == 'estimate':
        return EstimateAnswer(data.get('estimate'))
    if atype == 'open':
        return OpenAnswer(data.get('answer'))
    raise InvalidPayloadError(f'Unknown answer type {atype}')


# ---- Grading results ----

@dataclass(frozen=True)
class ChoiceResult:
    success: bool
    solution: Optional[int]
    distribution: List[Any]

    def to_dict(self):
        return {'success': self.success, 'solution': self.solution, 'distribution': list(self.distribution)}


@dataclass(frozen=True)
class EstimateResult:
    success: bool
    solution: Any
    max: Any
    min: Any
    avg: Any

    def to_dict(self):
        return {'success': self.success, 'solution': self.solution, 'max': self.max, 'min': self.min, 'avg': self.avg}


@dataclass(frozen=True)
class OpenResult:
    success: bool
    correct_answer: Any
    stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        payload = dict(self.stats)
        payload.update({'success': self.success, 'correct_answer': self.correct_answer})
        return payload


@dataclass
class GameSession:
    """Identity of the player within one game; filled in by start/join."""
    game_id: Any = None
    username: Optional[str] = None
