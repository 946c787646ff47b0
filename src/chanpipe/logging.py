"""
Configure logging, mainly the format.

A call to the function ``config_logger`` in a launching script is all that is needed to set up the logging format.
Usually the 'level' argument is the only argument one needs to customize::

  config_logger(level='debug')

If `level` is not specified, environment variable `LOGLEVEL` is used;
if that is not set, a default level (currently 'info') is used.

Do not call this in library modules.
Library modules should have ::

   logger = logging.getLogger(__name__)

and then just use ``logger`` to write logs without concern about formatting,
destination of the log message, etc.

The pipeline threads of ``chanpipe`` log their start and finish at the 'debug' level,
hence ``with_thread_name`` defaults to ``True``.
"""
import logging
import os
import time
import warnings
from datetime import datetime
from logging import Formatter

import pytz


def _make_config(
    *,
    level: str | int = None,
    with_thread_name: bool = True,
    timezone: str = 'UTC',
    **kwargs,
) -> dict:
    # 'level' is string form of the logging levels: 'debug', 'info', 'warning', 'error', 'critical'.
    if level is None:
        level = os.environ.get('LOGLEVEL', 'info')
    if level not in (
        logging.DEBUG,
        logging.INFO,
        logging.WARNING,
        logging.ERROR,
        logging.CRITICAL,
    ):
        level = getattr(logging, level.upper())

    if timezone.upper() == 'UTC':
        Formatter.converter = time.gmtime
    elif timezone.lower() == 'local':
        Formatter.converter = time.localtime
    else:
        tz = pytz.timezone(timezone)

        def custom_time(*args):
            return datetime.now(pytz.utc).astimezone(tz).timetuple()

        Formatter.converter = custom_time

    datefmt = '%Y-%m-%d %H:%M:%S'

    msg = (
        '[%(asctime)s.%(msecs)03d '
        + timezone
        + '; %(levelname)s; %(name)s, %(funcName)s, %(lineno)d]'
    )
    msg += '  '

    if with_thread_name:
        fmt = f'{msg}[%(threadName)s]  %(message)s'
    else:
        fmt = f'{msg}%(message)s'

    return dict(format=fmt, datefmt=datefmt, level=level, **kwargs)


def config_logger(**kwargs) -> None:
    kw = _make_config(**kwargs)

    rootlogger = logging.getLogger()
    if rootlogger.hasHandlers():
        rootlogger.handlers = []

    logging.basicConfig(**kw)

    logging.captureWarnings(True)
    warnings.filterwarnings('default', category=ResourceWarning)
    warnings.filterwarnings('default', category=DeprecationWarning)
