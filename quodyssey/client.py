import asyncio
import logging
import time

from quodyssey.config import Config
from quodyssey.errors import JoinRejectedError
from quodyssey.lifecycle import QuestionLifecycle
from quodyssey.models import GameSession, answer_from_dict
from quodyssey.push import SocketIOPush
from quodyssey.services.grading import AnswerGrader
from quodyssey.theme import FileThemeLoader
from quodyssey.transport import HttpTransport, resolve_base_url

logger = logging.getLogger(__name__)


class QuizClient:
    """Player-side API of one game session.

    Collaborators default to the HTTP, Socket.IO and file-backed
    implementations; tests and embedders may pass their own.
    """

    def __init__(self, hostname=None, port=None, game_id=None, username=None, config_class=Config,
                 transport=None, push=None, theme=None, clock=time.time, sleep=asyncio.sleep):
        self.config = config_class
        self.base_url = resolve_base_url(hostname, port, config_class.QUIZ_ORIGIN)
        self.session = GameSession(game_id=game_id, username=username)
        self.transport = transport or HttpTransport(self.base_url, timeout=config_class.HTTP_TIMEOUT_SEC)
        self.push = push or SocketIOPush(self.base_url, namespace=config_class.PUSH_NAMESPACE)
        self.theme = theme or FileThemeLoader(config_class.THEME_STORE_PATH)
        grader = AnswerGrader(
            max_edit_distance=config_class.MAX_EDIT_DISTANCE,
            estimate_tolerance=config_class.ESTIMATE_TOLERANCE,
        )
        self.lifecycle = QuestionLifecycle(self.session, self.transport, self.push, grader=grader,
                                           clock=clock, sleep=sleep)
        self.theme.restore()

    @property
    def game_id(self):
        return self.session.game_id

    @property
    def username(self):
        return self.session.username

    async def start(self):
        if not self.session.game_id:
            res = await self.transport.post('start')
            self.session.game_id = res.get('gameId')
            logger.info(f"[start] new game={self.session.game_id}")
            return res
        return await self.transport.post('start', {'gameId': self.session.game_id})

    async def join(self, username: str) -> bool:
        res = await self.transport.post('join', {'gameId': self.session.game_id, 'username': username})
        if not res.get('success'):
            raise JoinRejectedError(res)
        self.session.username = username
        logger.info(f"[join] game={self.session.game_id} username={username}")
        self.theme.apply(res.get('cssUrl'))
        return True

    async def next_round(self):
        return await self.transport.post('ask', {'gameId': self.session.game_id})

    async def get_question(self):
        """The current question; no request is made if one is already known."""
        return await self.lifecycle.get_current_question()

    async def get_next_question(self):
        """Resolves once the server announces the question of the next round."""
        return await self.lifecycle.await_next_question()

    async def answer(self, answer):
        """Submit an answer and return its grading once the countdown is over.

        ``answer`` is a ``ChoiceAnswer``/``EstimateAnswer``/``OpenAnswer`` or a
        dict such as ``{'type': 'choice', 'idx': 2}``.
        """
        if isinstance(answer, dict):
            answer = answer_from_dict(answer)
        return await self.lifecycle.submit_answer(answer)

    async def get_result_for_quiz(self, round_id):
        return await self.transport.get(f'resultQ/{self.session.game_id}/{round_id}')

    async def get_result_for_non_quiz(self, round_id):
        return await self.transport.get(f'resultA/{self.session.game_id}/{round_id}')

    async def get_scoreboard(self):
        return await self.transport.get(f'scoreboard/{self.session.game_id}')

    def get_current_question_remaining_time(self) -> int:
        return self.lifecycle.remaining_time_ms()

    async def close(self) -> None:
        close_push = getattr(self.push, 'close', None)
        if close_push:
            await close_push()
        close_transport = getattr(self.transport, 'close', None)
        if close_transport:
            close_transport()
