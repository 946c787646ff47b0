from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from time import perf_counter
from typing import Protocol, TypeVar

from typing_extensions import Self  # In 3.11, import this from `typing`

from ._common import (
    WAIT_INTERVAL_SECONDS,
    InvalidStateError,
    StopRequested,
    StreamClosed,
    TimeoutError,
)

logger = logging.getLogger(__name__)

Elem = TypeVar('Elem')


class Token(Protocol):
    '''
    The cancellation token. ``threading.Event`` and ``multiprocessing.Event``
    both qualify. Checking the token never consumes the signal.
    '''

    def is_set(self) -> bool:
        ...


class Stream(Iterator[Elem]):
    """
    A closable channel with synchronous (unbuffered) handoff.

    A ``put`` returns only after a consumer has taken the value in a ``get``.
    Any number of threads may put and get concurrently; each value goes to
    exactly one consumer, and values from one sender arrive in the order it
    sent them.

    The stream is closed exactly once, by the thread(s) that produce into it,
    after the last ``put`` has completed. Once closed, ``get`` raises
    :class:`StreamClosed` instead of blocking, and iteration ends.

    Both ``put`` and ``get`` accept a cancellation ``token``. While blocked,
    the call re-checks the token every ``wait_interval_seconds`` (or sooner,
    when the state of the stream changes) and raises :class:`StopRequested`
    once it is set. A ``put`` that gives up this way withdraws its value,
    i.e. the value is not delivered.
    """

    def __init__(self, *, name: str = None, wait_interval_seconds: float = None):
        """
        Parameters
        ----------
        name
            Used in log messages and ``repr``.
        wait_interval_seconds
            Max wait between two checks of the cancellation token in a blocked call.
            Defaults to ``WAIT_INTERVAL_SECONDS``.
        """
        if wait_interval_seconds is None:
            wait_interval_seconds = WAIT_INTERVAL_SECONDS
        assert wait_interval_seconds > 0
        self.name = name
        self.wait_interval_seconds = wait_interval_seconds
        self.workers: list = []
        # The threads that own this stream and are responsible for closing it.

        self._mutex = threading.Lock()
        self._changed = threading.Condition(self._mutex)
        self._item = None
        self._pending = False  # whether `_item` holds an offer waiting to be taken
        self._offered = 0
        self._taken = 0
        self._closed = False

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.name!r} closed={self._closed}>'

    @property
    def closed(self) -> bool:
        return self._closed

    def _wait(self, token: Token | None, deadline: float | None) -> None:
        # Call while holding `self._mutex`.
        if token is not None and token.is_set():
            raise StopRequested
        if deadline is None:
            if token is None:
                self._changed.wait()
            else:
                self._changed.wait(self.wait_interval_seconds)
            return
        available = deadline - perf_counter()
        if available <= 0:
            raise TimeoutError
        if token is not None:
            available = min(available, self.wait_interval_seconds)
        self._changed.wait(available)

    def put(self, x: Elem, *, token: Token = None, timeout: float = None) -> None:
        """
        Offer ``x`` and wait until a consumer has taken it.

        Raises
        ------
        StopRequested
            ``token`` got set before ``x`` was taken; ``x`` is withdrawn.
        TimeoutError
            ``x`` was not taken within ``timeout`` seconds; ``x`` is withdrawn.
        InvalidStateError
            The stream is closed.
        """
        deadline = None if timeout is None else perf_counter() + timeout
        with self._changed:
            # Wait for our turn; one offer at a time.
            while self._pending:
                if self._closed:
                    raise InvalidStateError(f'{self!r} is closed')
                self._wait(token, deadline)
            if self._closed:
                raise InvalidStateError(f'{self!r} is closed')
            if token is not None and token.is_set():
                raise StopRequested

            self._item = x
            self._pending = True
            self._offered += 1
            ticket = self._offered
            self._changed.notify_all()

            while self._taken < ticket:
                try:
                    self._wait(token, deadline)
                except (StopRequested, TimeoutError):
                    # `_wait` raises before waiting, with the mutex held,
                    # so nobody has taken the offer; withdraw it.
                    self._item = None
                    self._pending = False
                    self._offered -= 1
                    self._changed.notify_all()
                    raise

    def get(self, *, token: Token = None, timeout: float = None) -> Elem:
        """
        Wait for an offer and take it.

        Raises
        ------
        StreamClosed
            The stream is closed and nothing is pending.
        StopRequested
            ``token`` got set while waiting.
        TimeoutError
            Nothing was offered within ``timeout`` seconds.
        """
        deadline = None if timeout is None else perf_counter() + timeout
        with self._changed:
            while not self._pending:
                if self._closed:
                    raise StreamClosed
                self._wait(token, deadline)
            x = self._item
            self._item = None
            self._pending = False
            self._taken += 1
            self._changed.notify_all()
        return x

    def close(self) -> None:
        """
        Mark the stream finished. Only the producing side calls this,
        exactly once, after its final ``put`` has returned.
        """
        with self._changed:
            if self._closed:
                raise InvalidStateError(f'{self!r} is already closed')
            if self._pending:
                # Cannot happen when the owner respects the protocol.
                logger.warning('%r closed with an offer pending', self)
            self._closed = True
            self._changed.notify_all()

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> Elem:
        try:
            return self.get()
        except StreamClosed:
            raise StopIteration

    def drain(self) -> int:
        """
        Drain off the stream and return the number of elements taken.
        """
        n = 0
        for _ in self:
            n += 1
        return n

    def collect(self) -> list[Elem]:
        """
        Return all the remaining elements in a list.

        .. warning:: Do not call this on a stream that never closes,
            e.g. the output of :func:`generate_stream` before cancellation.
        """
        return list(self)

    def join(self, timeout=None) -> None:
        """
        Wait for the threads that own this stream to finish.
        If one of them failed, its exception is raised.
        ``timeout`` bounds the wait for all of them together.
        """
        deadline = None if timeout is None else perf_counter() + timeout
        for t in self.workers:
            if deadline is None:
                t.join()
            else:
                t.join(max(0, deadline - perf_counter()))
