import os


class Config:
    # Explicit server address; when either is missing the page origin is used
    QUIZ_HOST = os.environ.get('QUIZ_HOST')
    QUIZ_PORT = os.environ.get('QUIZ_PORT')
    QUIZ_ORIGIN = os.environ.get('QUIZ_ORIGIN') or 'localhost:8080'
    QUIZ_GAME_ID = os.environ.get('QUIZ_GAME_ID')
    # Socket.IO namespace the server announces rounds on
    PUSH_NAMESPACE = os.environ.get('PUSH_NAMESPACE') or '/ws'
    THEME_STORE_PATH = os.environ.get('THEME_STORE_PATH') or os.path.join(
        os.path.expanduser('~'), '.quodyssey', 'theme.json'
    )
    # Grading rules
    MAX_EDIT_DISTANCE = int(os.environ.get('MAX_EDIT_DISTANCE', '2'))
    ESTIMATE_TOLERANCE = float(os.environ.get('ESTIMATE_TOLERANCE', '0.1'))
    # Optional: HTTP request timeout (sec). 0 disables.
    HTTP_TIMEOUT_SEC = float(os.environ.get('HTTP_TIMEOUT_SEC', '0'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
