import pytest

from fluxkit.hook import Hook, Signal


def test_emit_calls_slots_in_order_with_arguments():
    signal = Signal()
    calls = []
    signal.connect(lambda *a: calls.append(("first", a)))
    signal.connect(lambda *a: calls.append(("second", a)))
    signal.emit("x", 1)
    assert calls == [("first", ("x", 1)), ("second", ("x", 1))]


def test_same_slot_connected_twice_is_called_twice():
    signal = Signal()
    calls = []
    slot = calls.append
    signal.connect(slot)
    signal.connect(slot)
    signal.emit("a")
    assert calls == ["a", "a"]
    assert len(signal) == 2


def test_disconnect_removes_one_connection():
    signal = Signal()
    calls = []
    slot = calls.append
    signal.connect(slot)
    signal.connect(slot)
    signal.disconnect(slot)
    assert len(signal) == 1
    signal.emit("a")
    assert calls == ["a"]


def test_disconnect_unknown_slot_raises():
    signal = Signal()
    with pytest.raises(ValueError):
        signal.disconnect(print)


def test_connect_non_callable_raises():
    signal = Signal()
    with pytest.raises(TypeError):
        signal.connect("not callable")


def test_disconnect_all_silences_signal():
    signal = Signal()
    calls = []
    signal.connect(calls.append)
    signal.disconnect_all()
    signal.emit("a")
    assert calls == []
    assert len(signal) == 0


def test_hook_is_abstract():
    with pytest.raises(TypeError):
        Hook()


def test_hook_subclass_emits_dispatched():
    class Twice(Hook):
        def dispatch(self, type, message):
            self.dispatched.emit(type, message)
            self.dispatched.emit(type, message)

    hook = Twice()
    relay = Signal()
    hook.dispatched.connect(relay.emit)
    received = []
    relay.connect(lambda t, m: received.append((t, m)))
    hook.dispatch("action1", {"v": 1})
    assert received == [("action1", {"v": 1}), ("action1", {"v": 1})]
    assert len(hook.dispatched) == 1