import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Flat-file snapshot of the board, rewritten after every mutation
    SNAPSHOT_PATH = os.environ.get('SNAPSHOT_PATH') or 'data.json'
    # Optional: coalesce snapshot writes (ms). 0 writes after every mutation.
    SNAPSHOT_DEBOUNCE_MS = int(os.environ.get('SNAPSHOT_DEBOUNCE_MS', '0'))
    # Expiry sweeper (seconds)
    SWEEP_INTERVAL_SEC = int(os.environ.get('SWEEP_INTERVAL_SEC', '60'))
    # How long an expired countdown stays on the board before it is swept
    EXPIRY_GRACE_SEC = int(os.environ.get('EXPIRY_GRACE_SEC', '60'))
    # Comma separated list, '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Placeholder identity until a client sends set-user-info
    DEFAULT_USER_NAME = os.environ.get('DEFAULT_USER_NAME', 'Unknown user')
    DEFAULT_USER_COLOR = os.environ.get('DEFAULT_USER_COLOR', '#3b82f6')
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '32'))
    BOARD_TITLE = os.environ.get('BOARD_TITLE', 'Shared Countdown Board')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PORT = int(os.environ.get('PORT', '3000'))
