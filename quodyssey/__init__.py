from quodyssey.client import QuizClient
from quodyssey.config import Config
from quodyssey.errors import (
    InvalidPayloadError,
    JoinRejectedError,
    NoQuestionError,
    QuizClientError,
    SubmissionRejectedError,
    TransportError,
    TypeMismatchError,
)
from quodyssey.models import ChoiceAnswer, EstimateAnswer, OpenAnswer, Question


def create_client(config_class=Config, **kwargs) -> QuizClient:
    """Build a client from configuration; keyword arguments take precedence."""
    kwargs.setdefault('hostname', config_class.QUIZ_HOST)
    kwargs.setdefault('port', config_class.QUIZ_PORT)
    kwargs.setdefault('game_id', config_class.QUIZ_GAME_ID)
    return QuizClient(config_class=config_class, **kwargs)


__all__ = [
    'ChoiceAnswer',
    'Config',
    'EstimateAnswer',
    'InvalidPayloadError',
    'JoinRejectedError',
    'NoQuestionError',
    'OpenAnswer',
    'Question',
    'QuizClient',
    'QuizClientError',
    'SubmissionRejectedError',
    'TransportError',
    'TypeMismatchError',
    'create_client',
]
