import pytest

from chanpipe.logging import config_logger


# The pipeline threads log at the 'debug' level. Set `LOGLEVEL=debug`
# and run `pytest -s` to watch them start and finish.
@pytest.fixture(scope='session', autouse=True)
def logging_config():
    config_logger(with_thread_name=True)
    yield
