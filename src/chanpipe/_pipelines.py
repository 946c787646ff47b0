from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from ._common import StopRequested, StreamClosed
from ._stream import Stream, Token
from .threading import Thread

logger = logging.getLogger(__name__)


T = TypeVar('T')  # indicates input data element
TT = TypeVar('TT')  # indicates output after an op on `T`


def _start(stream: Stream, target: Callable, name: str, *args) -> Thread:
    t = Thread(target=target, args=(stream, *args), name=name)
    stream.workers.append(t)
    t.start()
    return t


def generate_stream(
    token: Token,
    func: Callable[..., T],
    /,
    *,
    with_token: bool = False,
    name: str = 'generate-stream',
    **kwargs,
) -> Stream[T]:
    """
    Call ``func`` over and over in a producer thread and stream the results.

    The producer never finishes on its own; it stops, and closes the stream,
    once it observes ``token`` set. A value that has been computed
    but not yet taken at that moment is dropped.

    Parameters
    ----------
    func
        Called with no positional argument, or with ``token`` as the single
        positional argument if ``with_token`` is ``True``; plus ``kwargs``.
    """
    if with_token:
        func = functools.partial(func, token)
    if kwargs:
        func = functools.partial(func, **kwargs)

    def produce(stream):
        n = 0
        try:
            while True:
                stream.put(func(), token=token)
                n += 1
        except StopRequested:
            logger.debug('%s cancelled after %d items', name, n)
        finally:
            stream.close()

    stream = Stream(name=name)
    _start(stream, produce, f'{name}-thread')
    return stream


def _stream_iterable(token: Token, data: Iterable[T], name: str) -> Stream[T]:
    def produce(stream):
        n = 0
        try:
            for x in data:
                stream.put(x, token=token)
                n += 1
            logger.debug('%s exhausted after %d items', name, n)
        except StopRequested:
            logger.debug('%s cancelled after %d items', name, n)
        finally:
            stream.close()

    stream = Stream(name=name)
    _start(stream, produce, f'{name}-thread')
    return stream


def stream_slice(
    token: Token, data: Iterable[T], /, *, name: str = 'stream-slice'
) -> Stream[T]:
    """
    Stream the elements of ``data`` in order, then close.

    An empty ``data`` gives a stream that closes without any element.
    """
    return _stream_iterable(token, data, name)


def stream_map(
    token: Token,
    data: Mapping[Any, T],
    /,
    *,
    keys: bool = False,
    name: str = 'stream-map',
) -> Stream[T]:
    """
    Stream the values of ``data``, or its keys if ``keys`` is ``True``, then close.

    The order is whatever the iteration order of ``data`` is.
    Exactly ``len(data)`` elements come out unless cancelled.
    """
    return _stream_iterable(token, data.keys() if keys else data.values(), name)


def fan_out(
    token: Token,
    instream: Stream[T],
    func: Callable[..., TT],
    n: int,
    /,
    *,
    with_token: bool = False,
    name: str = 'fan-out',
    **kwargs,
) -> list[Stream[TT]]:
    """
    Apply ``func`` to the elements of ``instream`` in ``n`` worker threads.

    The workers compete for elements of ``instream``; whichever is free takes
    the next one. Each worker puts its results on its own output stream,
    and closes that stream once ``instream`` is exhausted or it sees
    ``token`` set. There is no order across the output streams.

    The token is checked after an element is taken from ``instream``, so a
    worker may take one element after cancellation and drop it.

    Parameters
    ----------
    func
        Called with the element as the single positional argument, or with
        ``(token, element)`` if ``with_token`` is ``True``; plus ``kwargs``.
    n
        Number of workers. If ``n <= 0``, no worker is started and
        an empty list is returned.
    """
    if with_token:
        func = functools.partial(func, token)
    if kwargs:
        func = functools.partial(func, **kwargs)

    def work(stream, idx):
        count = 0
        try:
            for x in instream:
                if token.is_set():
                    # Drop `x`.
                    logger.debug('%s-%d cancelled after %d items', name, idx, count)
                    break
                stream.put(func(x), token=token)
                count += 1
            else:
                logger.debug('%s-%d exhausted after %d items', name, idx, count)
        except StopRequested:
            logger.debug('%s-%d cancelled after %d items', name, idx, count)
        finally:
            stream.close()

    streams = []
    for i in range(n):
        stream = Stream(name=f'{name}-{i}')
        _start(stream, work, f'{name}-thread-{i}', i)
        streams.append(stream)
    return streams


class _Countdown:
    '''
    The last of ``n`` parties to call :meth:`done` gets ``True``.
    '''

    def __init__(self, n: int):
        assert n > 0
        self._n = n
        self._lock = threading.Lock()

    def done(self) -> bool:
        with self._lock:
            self._n -= 1
            return self._n == 0


def fan_in(token: Token, *streams: Stream[T], name: str = 'fan-in') -> Stream[T]:
    """
    Merge ``streams`` into one stream.

    One relay thread per input stream moves elements onto the merged stream.
    The merged stream is closed once every relay has finished, either because
    its input is exhausted or because it has seen ``token`` set.
    Elements from the same input keep their relative order; there is no order
    across inputs.

    With no input, the merged stream is closed right away.
    """
    outstream = Stream(name=name)
    if not streams:
        outstream.close()
        return outstream

    # Counts all relays before any of them starts, so that an early finisher
    # cannot close the output while others are still to come.
    countdown = _Countdown(len(streams))

    def relay(stream, instream, idx):
        n = 0
        try:
            while True:
                x = instream.get(token=token)
                stream.put(x, token=token)
                n += 1
        except StreamClosed:
            logger.debug('%s-%d exhausted after %d items', name, idx, n)
        except StopRequested:
            logger.debug('%s-%d cancelled after %d items', name, idx, n)
        finally:
            if countdown.done():
                stream.close()

    for i, s in enumerate(streams):
        _start(outstream, relay, f'{name}-thread-{i}', s, i)
    return outstream
