"""
The module ``chanpipe.pipelines`` provides building blocks for producer/worker/merger
pipelines that run in threads and pass data through :class:`Stream` objects.

A :class:`Stream` is a closable channel with synchronous handoff: a ``put`` returns
only once some consumer has taken the value. Each stage owns its output stream(s),
runs in its own thread(s), and closes what it owns when it is done.

All stages of one pipeline share a cancellation token, typically a ``threading.Event``.
Setting the token asks every stage to stop soon; every stream then closes,
so consumers iterating over them are not left blocked.

Sources
=======

- :func:`generate_stream` calls a function over and over; it runs until cancelled.
- :func:`stream_slice` streams the elements of a sequence in order.
- :func:`stream_map` streams the values (or keys) of a mapping.

Fan-out and fan-in
==================

- :func:`fan_out` applies a function to the elements of one stream in ``n`` worker threads,
  each with its own output stream.
- :func:`fan_in` merges any number of streams into one.

Example
=======

>>> import threading
>>> from chanpipe.pipelines import stream_slice, fan_out, fan_in
>>> token = threading.Event()
>>> source = stream_slice(token, range(10))
>>> branches = fan_out(token, source, lambda x: x * 2, 3)
>>> sorted(fan_in(token, *branches))
[0, 2, 4, 6, 8, 10, 12, 14, 16, 18]

Order is kept within one stream, but not across the branches of a fan-out,
hence the ``sorted`` above.

An unlimited source is stopped through the token:

>>> from chanpipe.pipelines import generate_stream
>>> token = threading.Event()
>>> ones = generate_stream(token, lambda: 1)
>>> [next(ones) for _ in range(3)]
[1, 1, 1]
>>> token.set()
>>> len(ones.collect()) <= 1
True
"""

from ._common import InvalidStateError, StopRequested, StreamClosed
from ._pipelines import fan_in, fan_out, generate_stream, stream_map, stream_slice
from ._stream import Stream, Token

__all__ = [
    'InvalidStateError',
    'StopRequested',
    'Stream',
    'StreamClosed',
    'Token',
    'fan_in',
    'fan_out',
    'generate_stream',
    'stream_map',
    'stream_slice',
]
