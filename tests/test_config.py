import pytest

from eventhub import __version__
from eventhub.config import DispatcherConfig
from eventhub.events import EventDispatcher, InvalidListenerOptions, ListenerOptions
from eventhub.events.history import EventHistory


def test_package_exports():
    import eventhub

    assert __version__
    assert eventhub.EventDispatcher is EventDispatcher


def test_config_defaults():
    config = DispatcherConfig()
    assert config.separator == "."
    assert config.history_size == 0
    assert config.error_sink is None


@pytest.mark.parametrize("kwargs", [{"separator": ""}, {"history_size": -1}])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        DispatcherConfig(**kwargs)


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("EVENTHUB_SEPARATOR", "::")
    monkeypatch.setenv("EVENTHUB_HISTORY_SIZE", "10")

    config = DispatcherConfig.from_env()

    assert config.separator == "::"
    assert config.history_size == 10


def test_dispatcher_uses_config_separator():
    dispatcher = EventDispatcher(DispatcherConfig(separator="/"))
    assert dispatcher.get_global_separator() == "/"


def test_listener_options_defaults():
    options = ListenerOptions()
    assert options.priority == 0
    assert options.concurrency is None
    assert options.separator is None
    assert options.throttle is None and options.debounce is None


def test_invalid_listener_options_is_value_error():
    with pytest.raises(ValueError) as excinfo:
        ListenerOptions(throttle=1, debounce=1)
    assert isinstance(excinfo.value, InvalidListenerOptions)
    assert excinfo.value.option == "throttle"


def test_event_history_rejects_negative_size():
    with pytest.raises(ValueError):
        EventHistory(-1)

