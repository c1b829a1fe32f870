import pytest

import msgchannel
from msgchannel import config


def test_defaults():
    options = msgchannel.ChannelOptions()
    assert options.fetch_timeout is None


def test_from_environment():

    options = config.ChannelOptions.from_environment({config.FETCH_TIMEOUT_VARIABLE: '2.5'})
    assert options.fetch_timeout == 2.5

    options = config.ChannelOptions.from_environment({config.FETCH_TIMEOUT_VARIABLE: '  '})
    assert options.fetch_timeout is None

    options = config.ChannelOptions.from_environment({})
    assert options.fetch_timeout is None

    with pytest.raises(ValueError):
        config.ChannelOptions.from_environment({config.FETCH_TIMEOUT_VARIABLE: 'later'})


def test_from_process_environment(monkeypatch):
    monkeypatch.setenv(config.FETCH_TIMEOUT_VARIABLE, '3')

    options = config.ChannelOptions.from_environment()
    assert options.fetch_timeout == 3.0


def test_check_timeout():

    assert config.check_timeout(None) is None
    assert config.check_timeout(0) is None
    assert config.check_timeout(float('inf')) is None
    assert config.check_timeout(1) == 1
    assert config.check_timeout(0.25) == 0.25

    for bad in (-0.1, 'x', False, [1]):
        with pytest.raises(ValueError):
            config.check_timeout(bad)

    with pytest.raises(ValueError):
        msgchannel.ChannelOptions(fetch_timeout=-1)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
