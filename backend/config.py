import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Shared secret required to host a session
    HOST_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'stacks123'
    # Answering window per question (seconds)
    QUESTION_DURATION_SEC = float(os.environ.get('QUESTION_DURATION_SEC', '10'))
    # "Get ready" hold between game-started and the first question (seconds). 0 publishes immediately.
    GAME_START_DELAY_SEC = float(os.environ.get('GAME_START_DELAY_SEC', '2'))
    SESSION_ID_LENGTH = int(os.environ.get('SESSION_ID_LENGTH', '8'))
    # Optional JSON file replacing the built-in question bank
    QUESTION_BANK_PATH = os.environ.get('QUESTION_BANK_PATH')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
