import pytest

from graphwire import config


def test_defaults():

    settings = config.Settings()

    assert settings.as_dict() == {
        'transport': config.Settings.transport,
        'timeout': config.Settings.timeout,
        'user': config.Settings.user,
        'user_agent': config.Settings.user_agent,
    }


def test_overrides():

    settings = config.Settings(timeout='2.5', user='alice', transport=None)

    assert settings.timeout == 2.5
    assert settings.user == 'alice'
    assert settings.transport == config.Settings.transport

    # Overrides are per instance.
    assert config.Settings().user == config.Settings.user
    assert 'alice' in repr(settings)


def test_rejected_settings():

    with pytest.raises(TypeError):
        config.Settings(timout=5)

    with pytest.raises(ValueError):
        config.Settings(timeout=0)

    with pytest.raises(ValueError):
        config.Settings(timeout='soon')


def test_environment(monkeypatch):

    monkeypatch.setenv('GRAPHWIRE_TEST_TIMEOUT', '12')
    assert config._float('GRAPHWIRE_TEST_TIMEOUT', 1.0) == 12.0

    monkeypatch.setenv('GRAPHWIRE_TEST_TIMEOUT', '')
    assert config._float('GRAPHWIRE_TEST_TIMEOUT', 1.0) == 1.0

    monkeypatch.delenv('GRAPHWIRE_TEST_TIMEOUT')
    assert config._float('GRAPHWIRE_TEST_TIMEOUT', 1.0) == 1.0

    monkeypatch.setenv('GRAPHWIRE_TEST_TIMEOUT', 'forever')
    with pytest.raises(ValueError):
        config._float('GRAPHWIRE_TEST_TIMEOUT', 1.0)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
