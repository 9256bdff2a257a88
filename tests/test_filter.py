import pytest

from fluxkit.applistener import AppListener
from fluxkit.dispatcher import AppDispatcher, Dispatcher
from fluxkit.filter import Filter


@pytest.fixture(autouse=True)
def fresh_app_dispatcher():
    AppDispatcher.reset()
    yield
    AppDispatcher.reset()


def collect(flt):
    received = []
    flt.dispatched.connect(lambda t, m: received.append((t, m)))
    return received


def test_type_defaults_to_empty():
    flt = Filter()
    assert flt.type == ""
    assert flt.types == []


def test_setting_type_replaces_types():
    flt = Filter(types=["a", "b"])
    assert flt.type == "a"
    flt.type = "c"
    assert flt.types == ["c"]


def test_filter_on_app_listener_passes_matching_type():
    dispatcher = Dispatcher()
    listener = AppListener(dispatcher)
    flt = Filter("addTask", parent=listener)
    received = collect(flt)
    dispatcher.dispatch("addTask", {"task": "t"})
    dispatcher.dispatch("other", 1)
    assert received == [("addTask", {"task": "t"})]


def test_filter_with_multiple_types():
    dispatcher = Dispatcher()
    flt = Filter(types=["action1", "action2"])
    assert flt.attach(dispatcher) is True
    received = collect(flt)
    for name in ("action1", "action3", "action2"):
        dispatcher.dispatch(name)
    assert [t for t, _ in received] == ["action1", "action2"]


def test_attach_to_object_without_signal_fails():
    flt = Filter("a")
    assert flt.attach(object()) is False
    assert flt.attach(None) is False


def test_nested_filters():
    dispatcher = Dispatcher()
    outer = Filter(types=["a", "b"], parent=dispatcher)
    inner = Filter("b", parent=outer)
    received = collect(inner)
    dispatcher.dispatch("a")
    dispatcher.dispatch("b", 2)
    assert received == [("b", 2)]


def test_reattach_moves_to_new_parent():
    first, second = Dispatcher(), Dispatcher()
    flt = Filter("a", parent=first)
    received = collect(flt)
    flt.attach(second)
    first.dispatch("a", 1)
    second.dispatch("a", 2)
    assert received == [("a", 2)]
    assert flt.parent is second