"""
Logging Configuration
One stream handler on the package logger, level taken from app config
"""
import logging

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(app):
    """Configure the ``quizstack`` logger if no handlers are present."""
    logger = logging.getLogger('quizstack')
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(handler)
    logger.propagate = False

    # werkzeug request lines are noise outside development
    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.debug('Logging initialized: level=%s', logging.getLevelName(level))
    return logger
