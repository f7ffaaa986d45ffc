"""Errors raised by the quiz client.

Every failure reaches the caller as one of these; nothing is retried here.
"""


class QuizClientError(Exception):
    pass


class NoQuestionError(QuizClientError):
    """An answer was attempted before any question was fetched."""


class TypeMismatchError(QuizClientError):
    def __init__(self, question_type, answer_type):
        super().__init__(f'Current question has type {question_type}, but given answer is {answer_type}')
        self.question_type = question_type
        self.answer_type = answer_type


class InvalidPayloadError(QuizClientError):
    """The answer payload does not fit its declared type."""


class SubmissionRejectedError(QuizClientError):
    def __init__(self, response):
        super().__init__(f'Answer rejected: {response!r}')
        self.response = response


class JoinRejectedError(QuizClientError):
    def __init__(self, response):
        super().__init__(f'Join failed: {response!r}')
        self.response = response


class TransportError(QuizClientError):
    """Network or HTTP level failure talking to the game server."""
