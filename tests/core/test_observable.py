from recordconfig.core.observable import (
    ObservableRecord,
    SupportsChangeNotification,
    supports_change_notification,
)
from tests.records import ObservedSettings, PlainSettings


def test_listeners_receive_instance_and_field_name():
    record = ObservedSettings()
    seen = []
    record.subscribe(lambda instance, name: seen.append((instance, name, getattr(instance, name))))

    record.ExampleInt = 3
    record.ExampleString = "x"

    assert seen == [(record, "ExampleInt", 3), (record, "ExampleString", "x")]


def test_private_attributes_do_not_notify():
    record = ObservedSettings()
    seen = []
    record.subscribe(lambda instance, name: seen.append(name))
    record._scratch = 1
    assert seen == []


def test_unsubscribe_stops_notifications():
    record = ObservedSettings()
    seen = []

    def listener(instance, name):
        seen.append(name)

    record.subscribe(listener)
    record.subscribe(listener)
    record.ExampleInt = 1
    record.unsubscribe(listener)
    record.ExampleInt = 2
    assert seen == ["ExampleInt"]


def test_equality_ignores_listeners():
    record = ObservedSettings(ExampleInt=5)
    record.subscribe(lambda instance, name: None)
    assert record == ObservedSettings(ExampleInt=5)


def test_capability_check():
    assert issubclass(ObservedSettings, SupportsChangeNotification)
    assert supports_change_notification(ObservedSettings())
    assert not supports_change_notification(PlainSettings())
    assert isinstance(ObservedSettings(), ObservableRecord)
