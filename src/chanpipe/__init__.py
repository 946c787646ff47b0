"""
The package ``chanpipe`` provides concurrent streaming primitives built on threads:

1. :class:`~chanpipe.pipelines.Stream`, a closable channel with synchronous handoff
   whose blocking calls can be interrupted by a shared cancellation token.
2. Sources that fill a stream from a function, a sequence, or a mapping.
3. Fan-out of one stream to ``n`` concurrent workers, and fan-in of many streams into one.

See :mod:`chanpipe.pipelines` for details.

To install, do

::

   python3 -m pip install chanpipe
"""

__version__ = '0.1.0'


from . import pipelines, threading
from ._common import TimeoutError
from .pipelines import (
    InvalidStateError,
    StopRequested,
    Stream,
    StreamClosed,
    fan_in,
    fan_out,
    generate_stream,
    stream_map,
    stream_slice,
)
