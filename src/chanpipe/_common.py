import os

TimeoutError = TimeoutError

WAIT_INTERVAL_SECONDS = float(os.environ.get('CHANPIPE_WAIT_INTERVAL', 0.01))
"""
Max time a blocked stream operation waits before it checks the cancellation token again.
Overridable via the environment variable ``CHANPIPE_WAIT_INTERVAL`` or per stream.
"""


class StopRequested(Exception):
    '''
    A blocking stream operation gave up because the cancellation token was set.
    '''


class StreamClosed(Exception):
    '''
    The stream is closed and there are no more values to get.
    '''


class InvalidStateError(RuntimeError):
    pass
