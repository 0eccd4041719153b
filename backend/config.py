import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Single Socket.IO room every admitted connection joins
    ROOM_ID = os.environ.get('ROOM_ID', 'caro-room')
    # Per-turn countdown (seconds) before the server plays for the idle player
    TURN_TIME_SEC = int(os.environ.get('TURN_TIME_SEC', '30'))
    # Working area eagerly initialised on reset; the grid itself is unbounded
    BOARD_SIZE = int(os.environ.get('BOARD_SIZE', '20'))
    WIN_LENGTH = int(os.environ.get('WIN_LENGTH', '5'))
    # Entry gate. Empty password disables the gate; a bcrypt hash wins over the plain value.
    GAME_PASSWORD = os.environ.get('GAME_PASSWORD', '123456')
    GAME_PASSWORD_HASH = os.environ.get('GAME_PASSWORD_HASH')
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    # Countdown tasks are not spawned under TESTING unless this is set
    ENABLE_CLOCK_IN_TESTS = False
