import os

from .utils import DEFAULT_FOUL_LIMIT


class Config:
    # Where game snapshots are written (one JSON file per game)
    DATA_DIR = os.environ.get('COURTSIDE_DATA_DIR', 'games')
    HOST = os.environ.get('COURTSIDE_HOST', '127.0.0.1')
    PORT = int(os.environ.get('COURTSIDE_PORT', '7122'))
    # Cumulative fouls at which a player is reported as fouled out
    FOUL_LIMIT = int(os.environ.get('COURTSIDE_FOUL_LIMIT', str(DEFAULT_FOUL_LIMIT)))
    TESTING = False
