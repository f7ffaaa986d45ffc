import asyncio
import enum
import logging
import time
from typing import Optional

from quodyssey.errors import InvalidPayloadError, NoQuestionError, SubmissionRejectedError, TypeMismatchError
from quodyssey.models import GameSession, Question
from quodyssey.services.grading import AnswerGrader

logger = logging.getLogger(__name__)


class LifecycleState(str, enum.Enum):
    NO_QUESTION = 'no_question'
    QUESTION_PENDING = 'question_pending'
    QUESTION_ACTIVE = 'question_active'
    AWAITING_RESULT = 'awaiting_result'


class QuestionLifecycle:
    """Tracks the current question of one game session.

    - At most one ``getq`` fetch is in flight; concurrent callers share it
    - New rounds arrive through the push channel and replace the question
    - Answers are graded only after the question's countdown has elapsed
    """

    def __init__(self, session: GameSession, transport, push, grader: Optional[AnswerGrader] = None,
                 clock=time.time, sleep=asyncio.sleep):
        self.session = session
        self.transport = transport
        self.push = push
        self.grader = grader or AnswerGrader()
        self.clock = clock
        self.sleep = sleep
        self.current_question: Optional[Question] = None
        self._pending_fetch: Optional[asyncio.Future] = None
        self._generation = 0
        self._awaiting = 0

    @property
    def state(self) -> LifecycleState:
        if self._awaiting:
            return LifecycleState.AWAITING_RESULT
        if self.current_question is not None:
            return LifecycleState.QUESTION_ACTIVE
        if self._pending_fetch is not None:
            return LifecycleState.QUESTION_PENDING
        return LifecycleState.NO_QUESTION

    def _replace(self, question: Question) -> None:
        self.current_question = question
        self._generation += 1

    async def get_current_question(self) -> Optional[Question]:
        """The current question, fetched from the server only if none is known.

        Resolves to ``None`` when the server has no running question.
        """
        if self.current_question is not None:
            return self.current_question
        if self._pending_fetch is None:
            self._pending_fetch = asyncio.ensure_future(self._fetch_current_question(self._generation))
        # Shielded so one cancelled caller does not cancel the fetch for everyone
        return await asyncio.shield(self._pending_fetch)

    async def _fetch_current_question(self, generation: int) -> Optional[Question]:
        game_id = self.session.game_id
        logger.info(f"[question-fetch] game={game_id}")
        try:
            result = await self.transport.get(f'getq/{game_id}')
            if result.get('success') and self._generation == generation:
                self._replace(Question.from_payload(result, now=self.clock()))
                logger.info(
                    f"[question-set] game={game_id} round={self.current_question.round} "
                    f"type={self.current_question.type} duration={self.current_question.duration_ms}ms"
                )
            return self.current_question
        finally:
            self._pending_fetch = None

    async def await_next_question(self) -> Question:
        """Wait for the server to announce the next round."""
        loop = asyncio.get_running_loop()
        announced = loop.create_future()

        def on_question(payload):
            if announced.done():
                return
            try:
                question = Question.from_payload(payload, now=self.clock())
            except InvalidPayloadError as exc:
                announced.set_exception(exc)
                return
            self._replace(question)
            logger.info(f"[question-next] game={self.session.game_id} round={question.round} type={question.type}")
            announced.set_result(question)

        subscription = await self.push.register(self.session.game_id, on_question)
        try:
            return await announced
        finally:
            subscription.cancel()

    def remaining_time_ms(self) -> int:
        """Milliseconds left on the current question; negative once expired."""
        if self.current_question is None:
            raise NoQuestionError('No question was fetched yet')
        return self.current_question.remaining_ms(self.clock())

    async def submit_answer(self, answer):
        # Captured once: a round that starts while we wait must not change this grading
        question = self.current_question
        if question is None:
            raise NoQuestionError('Tried to answer but no question was fetched before')
        if answer.type != question.type:
            raise TypeMismatchError(question.type, answer.type)
        self.grader.validate(answer)

        game_id = self.session.game_id
        round_id = question.round
        response = await self.transport.post('answer', {
            'gameId': game_id,
            'roundId': round_id,
            'answer': self.grader.wire_answer(answer),
            'username': self.session.username,
        })
        if not response.get('success'):
            logger.warning(f"[answer-rejected] game={game_id} round={round_id} response={response!r}")
            raise SubmissionRejectedError(response)

        self._awaiting += 1
        try:
            wait_ms = max(0, question.remaining_ms(self.clock()))
            logger.info(f"[answer-wait] game={game_id} round={round_id} remaining={wait_ms}ms")
            await self.sleep(wait_ms / 1000.0)
            result = await self.transport.get(f'resultQ/{game_id}/{round_id}')
        finally:
            self._awaiting -= 1

        graded = self.grader.grade(answer, result)
        logger.info(f"[answer-graded] game={game_id} round={round_id} type={answer.type} success={graded.success}")
        return graded
