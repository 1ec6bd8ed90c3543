"""
Logger utility for the travel weather service
Console output plus an optional size-rotated log file, configured from the
'logging' section of api.yaml
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional


DEFAULT_LOGGER_NAME = "travel_weather"

DEFAULT_CONFIG = {
    'level': 'INFO',
    'file': None,
    'console': True,
    'max_bytes': 5 * 1024 * 1024,
    'backup_count': 3
}

CONSOLE_FORMAT = '%(asctime)s %(levelname)-7s %(message)s'
FILE_FORMAT = '%(asctime)s %(name)s %(levelname)s %(module)s:%(lineno)d %(message)s'

_loggers: Dict[str, "Logger"] = {}


class Logger:
    """Thin wrapper over a stdlib logger shared by the refresh jobs and the API"""

    def __init__(self, name=DEFAULT_LOGGER_NAME, config=None):
        """
        Args:
            name: Logger name
            config: 'logging' section of api.yaml
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.configure(config)

    def configure(self, config: Optional[Dict] = None):
        """
        Replace handlers according to a logging config

        Args:
            config: Mapping with 'level', 'file', 'console', 'max_bytes' and 'backup_count'
        """
        config = {**DEFAULT_CONFIG, **(config or {})}
        level = getattr(logging, str(config['level']).upper(), logging.INFO)
        self.logger.setLevel(level)

        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if config.get('file'):
            Path(config['file']).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                config['file'],
                maxBytes=int(config['max_bytes']),
                backupCount=int(config['backup_count']),
                encoding='utf-8'
            )
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            self.logger.addHandler(file_handler)

        if config.get('console'):
            stream_handler = logging.StreamHandler(sys.stdout)
            stream_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
            self.logger.addHandler(stream_handler)

    def debug(self, message, *args):
        self.logger.debug(message, *args)

    def info(self, message, *args):
        self.logger.info(message, *args)

    def warning(self, message, *args):
        self.logger.warning(message, *args)

    def error(self, message, *args):
        self.logger.error(message, *args)

    def exception(self, message, *args):
        """Error with the active traceback attached"""
        self.logger.exception(message, *args)

    def section(self, title):
        """Banner line pair around a title, used for startup and shutdown"""
        rule = "-" * 60
        self.logger.info(rule)
        self.logger.info(title)
        self.logger.info(rule)


def get_logger(name=DEFAULT_LOGGER_NAME, config=None):
    """
    Shared logger by name

    Handlers are rebuilt only when a config is passed, so modules can call
    this at import time without undoing what the application configured.

    Args:
        name: Logger name
        config: 'logging' section of api.yaml

    Returns:
        Logger
    """
    logger = _loggers.get(name)
    if logger is None:
        logger = Logger(name, config)
        _loggers[name] = logger
    elif config is not None:
        logger.configure(config)
    return logger
