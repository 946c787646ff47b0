import logging
import threading

from chanpipe.logging import _make_config
from chanpipe.pipelines import fan_in, fan_out, stream_slice


def test_make_config(monkeypatch):
    monkeypatch.setenv('LOGLEVEL', 'warning')
    kw = _make_config()
    assert kw['level'] == logging.WARNING
    assert '%(threadName)s' in kw['format']

    kw = _make_config(level='debug', with_thread_name=False, timezone='US/Pacific')
    assert kw['level'] == logging.DEBUG
    assert '%(threadName)s' not in kw['format']
    assert 'US/Pacific' in kw['format']
    assert len(logging.Formatter.converter()) == 9

    kw = _make_config(level=logging.ERROR, timezone='UTC')
    assert kw['level'] == logging.ERROR


def test_pipeline_logs(caplog):
    # Logging is configured once in conftest; `caplog` only raises the level here.
    token = threading.Event()
    with caplog.at_level(logging.DEBUG, logger='chanpipe'):
        stream = stream_slice(token, [1, 2], name='src')
        outstream = fan_in(token, *fan_out(token, stream, str, 2, name='work'))
        assert sorted(outstream.collect()) == ['1', '2']
        outstream.join()
        stream.join()
    assert 'src exhausted after 2 items' in caplog.text
    assert 'fan-in-0 exhausted' in caplog.text
