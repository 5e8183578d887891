"""Module for initializing settings related to the ledgervote logger
Functions:
-get_logger
-overwrite_logger_level"""

import logging, coloredlogs
import os
from logging.handlers import RotatingFileHandler

VALID_LVLS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
_LOG_LVL = os.getenv('LOG_LEVEL', None)
if _LOG_LVL == '0':
    _LOG_LVL = 0
elif _LOG_LVL:
    assert _LOG_LVL in VALID_LVLS, "Log level {} not in valid levels {}".format(_LOG_LVL, VALID_LVLS)
    _LOG_LVL = getattr(logging, _LOG_LVL)
else:
    _LOG_LVL = logging.INFO

logging.raiseExceptions = False

format = '%(asctime)s.%(msecs)03d %(name)s[%(process)d] <{}> %(levelname)-2s %(message)s'.format(
    os.getenv('HOST_NAME', 'Engine')
)

"""
Custom Styling
"""

coloredlogs.DEFAULT_LEVEL_STYLES = {
    'critical': {'color': 'white', 'bold': True, 'background': 'red'},
    'debug': {'color': 'green'},
    'error': {'color': 'red'},
    'info': {'color': 'white'},
    'warning': {'color': 'yellow'},
}
coloredlogs.DEFAULT_FIELD_STYLES = {
    'asctime': {'color': 'green'},
    'hostname': {'color': 'magenta'},
    'levelname': {'color': 'black', 'bright': True},
    'name': {'color': 'blue'},
    'programname': {'color': 'cyan'}
}


class ColoredFileHandler(RotatingFileHandler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setFormatter(
            coloredlogs.ColoredFormatter(format)
        )


class ColoredStreamHandler(logging.StreamHandler):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setFormatter(
            coloredlogs.ColoredFormatter(format)
        )


def _ignore(*args, **kwargs):
    return


class MockLogger:
    def __getattr__(self, item):
        return _ignore


_handlers = []


def _get_handlers():
    if len(_handlers) > 0:
        return _handlers

    _handlers.append(ColoredStreamHandler())

    log_dir = os.getenv('LEDGERVOTE_LOG_DIR', None)
    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        filename = os.path.join(log_dir, '{}.log'.format(os.getenv('HOST_NAME', 'ledgervote')))
        _handlers.append(
            ColoredFileHandler(filename, delay=True, mode='a', maxBytes=5*1024*1024, backupCount=5)
        )

    return _handlers


def get_logger(name=''):
    if _LOG_LVL == 0:
        return MockLogger()

    log = logging.getLogger(name)
    log.setLevel(_LOG_LVL)

    if not log.handlers:
        for handler in _get_handlers():
            log.addHandler(handler)
        log.propagate = False

    return log


def overwrite_logger_level(level):
    global _LOG_LVL
    _LOG_LVL = level

    for name in logging.Logger.manager.loggerDict.keys():
        log = logging.getLogger(name)
        log.setLevel(level)
