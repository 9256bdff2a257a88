import logging

import pytest

from fluxkit.dispatcher import AppDispatcher, Dispatcher, log_exception
from fluxkit.hook import Hook
from fluxkit.listener import Listener


@pytest.fixture
def app_dispatcher():
    AppDispatcher.reset()
    yield AppDispatcher.instance()
    AppDispatcher.reset()


def test_instance_is_shared_and_dispatches(app_dispatcher):
    assert AppDispatcher.instance() is app_dispatcher
    received = []
    app_dispatcher.dispatched.connect(lambda t, m: received.append(t))
    app_dispatcher.dispatch("TestMessage")
    assert received == ["TestMessage"]


def test_reset_creates_new_instance(app_dispatcher):
    AppDispatcher.reset()
    assert AppDispatcher.instance() is not app_dispatcher
    assert isinstance(AppDispatcher.instance(), AppDispatcher)


def test_dispatch_values():
    dispatcher = Dispatcher()
    messages = []
    dispatcher.dispatched.connect(lambda t, m: messages.append((t, m)))

    dispatcher.dispatch("test1", 123)
    assert len(messages) == 1
    assert messages[0] == ("test1", 123)

    message = {"v1": 1, "v2": "2", "v3": 3.0}
    dispatcher.dispatch("test2", message)
    assert len(messages) == 2
    assert messages[1] == ("test2", message)


def test_default_message_is_none():
    dispatcher = Dispatcher()
    messages = []
    dispatcher.dispatched.connect(lambda t, m: messages.append((t, m)))
    dispatcher.dispatch("startApp")
    assert messages == [("startApp", None)]


def test_dispatcher_hook():
    dispatcher = Dispatcher()
    type_list = []
    dispatcher.dispatched.connect(lambda t, m: type_list.append(t))

    class Hook1(Hook):
        def dispatch(self, type, message):
            pass

    dispatcher.hook = Hook1()
    dispatcher.dispatch("action1")
    assert len(type_list) == 0

    class Hook2(Hook):
        def dispatch(self, type, message):
            for _ in range(3):
                self.dispatched.emit(type, message)

    hook2 = Hook2()
    dispatcher.hook = hook2
    assert dispatcher.hook is hook2
    dispatcher.dispatch("action1")
    assert len(type_list) == 3

    dispatcher.hook = None
    dispatcher.dispatch("action1")
    assert len(type_list) == 4
    assert type_list == ["action1"] * 4


def test_replaced_hook_is_disconnected():
    dispatcher = Dispatcher()
    received = []
    dispatcher.dispatched.connect(lambda t, m: received.append(t))

    class Passing(Hook):
        def dispatch(self, type, message):
            self.dispatched.emit(type, message)

    old = Passing()
    dispatcher.hook = old
    dispatcher.hook = None
    old.dispatched.emit("stray", None)
    assert received == []


def test_reentrant_dispatch_is_queued():
    dispatcher = Dispatcher()
    log = []

    def callback(type, message):
        log.append(("listener", type))
        if type == "a":
            dispatcher.dispatch("b")
            log.append(("after-dispatch", type))

    dispatcher.add_listener(callback)
    dispatcher.dispatched.connect(lambda t, m: log.append(("signal", t)))
    dispatcher.dispatch("a")
    assert log == [
        ("listener", "a"),
        ("after-dispatch", "a"),
        ("signal", "a"),
        ("listener", "b"),
        ("signal", "b"),
    ]


def test_add_listener_assigns_increasing_ids():
    dispatcher = Dispatcher()
    listener = Listener()
    first = dispatcher.add_listener(listener)
    second = dispatcher.add_listener(lambda t, m: None)
    assert (first, second) == (1, 2)
    assert listener.listener_id == first


def test_add_listener_rejects_non_callable():
    with pytest.raises(TypeError):
        Dispatcher().add_listener(42)


def test_remove_listener_stops_delivery():
    dispatcher = Dispatcher()
    received = []
    listener_id = dispatcher.add_listener(lambda t, m: received.append(t))
    dispatcher.dispatch("one")
    dispatcher.remove_listener(listener_id)
    dispatcher.remove_listener(999)
    dispatcher.dispatch("two")
    assert received == ["one"]


def test_wait_for_orders_listeners():
    dispatcher = Dispatcher()
    order = []
    first = Listener(callback=lambda t, m: order.append("first"))
    second = Listener(callback=lambda t, m: order.append("second"))
    dispatcher.add_listener(first)
    second_id = dispatcher.add_listener(second)
    first.wait_for = [second_id]
    dispatcher.dispatch("go")
    assert order == ["second", "first"]


def test_wait_for_outside_dispatch_does_nothing():
    dispatcher = Dispatcher()
    received = []
    listener_id = dispatcher.add_listener(lambda t, m: received.append(t))
    dispatcher.wait_for([listener_id])
    assert received == []


def test_cyclic_dependency_is_reported(caplog):
    dispatcher = Dispatcher()
    order = []
    one = Listener(callback=lambda t, m: order.append(1))
    two = Listener(callback=lambda t, m: order.append(2))
    one_id = dispatcher.add_listener(one)
    two_id = dispatcher.add_listener(two)
    one.wait_for = [two_id]
    two.wait_for = [one_id]
    with caplog.at_level(logging.WARNING, logger="fluxkit"):
        dispatcher.dispatch("loop")
    assert order == [2, 1]
    assert any("Cyclic dependency detected" in r.getMessage() for r in caplog.records)


def test_log_exception_formats_location(caplog):
    try:
        raise ValueError("boom")
    except ValueError as error:
        caught = error
    with caplog.at_level(logging.WARNING, logger="fluxkit"):
        text = log_exception(caught)
    assert text.startswith(__file__ + ":")
    assert text.endswith(": ValueError: boom")
    assert any(r.getMessage() == text for r in caplog.records)


def test_log_exception_without_traceback():
    assert log_exception(KeyError("k")) == ":: KeyError: 'k'"