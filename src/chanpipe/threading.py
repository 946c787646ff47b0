from __future__ import annotations

import logging
import threading

from ._common import InvalidStateError, TimeoutError

__all__ = [
    'InvalidStateError',
    'Thread',
]

logger = logging.getLogger(__name__)


class Thread(threading.Thread):
    """
    A daemon ``threading.Thread`` that keeps the return value or exception of its target.

    Every producer, fan-out worker, and fan-in relay runs in one of these,
    so that a failure in a user function can be retrieved from the thread
    that owns the affected stream, via :meth:`join` or :meth:`result`.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('daemon', True)
        super().__init__(*args, **kwargs)
        self._result_ = None
        self._exc_: BaseException | None = None

    def run(self):
        try:
            if self._target is not None:
                self._result_ = self._target(*self._args, **self._kwargs)
        except BaseException as e:
            self._exc_ = e
            logger.error('%s: %r', self.name, e)
            raise  # Standard threading will print error info here.
        finally:
            # Avoid a refcycle if the thread is running a function with
            # an argument that has a member that points to the thread.
            del self._target, self._args, self._kwargs

    def join(self, timeout=None):
        '''
        Same behavior as the standard lib, except that if the thread
        terminates with an exception, the exception is raised.
        '''
        super().join(timeout=timeout)
        if not self.is_alive() and self._exc_ is not None:
            raise self._exc_

    def done(self) -> bool:
        '''
        ``True`` once the thread has started and terminated.
        '''
        return self._started.is_set() and not self.is_alive()

    def result(self, timeout=None):
        '''
        Wait for the thread to finish and return what the target returned,
        or raise what it raised. Raise ``TimeoutError`` if it is still running
        after ``timeout`` seconds.
        '''
        self.join(timeout)
        if self.is_alive():
            raise TimeoutError
        return self._result_
