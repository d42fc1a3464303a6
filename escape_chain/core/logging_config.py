import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def configure_logging(level=logging.INFO):
    """Sets up root logging for a game run. Accepts a level number or name ('DEBUG')."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig is a no-op once handlers exist, so the level is applied explicitly
    logging.getLogger().setLevel(level)
    return level
