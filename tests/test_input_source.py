from input_source import InputSource
from viewport_manager import PointerPosition


class RecordingListener:
    def __init__(self):
        self.events = []

    def on_pointer_move(self, x, y):
        self.events.append(('move', x, y))

    def on_gesture_start(self, pointer):
        self.events.append(('start', pointer.x, pointer.y))

    def on_gesture_end(self):
        self.events.append(('end',))

    def on_wheel(self, anchor, delta):
        self.events.append(('wheel', anchor.x, anchor.y, delta))


def test_events_reach_listeners_in_order():
    source = InputSource()
    listener = RecordingListener()
    source.subscribe(listener)

    source.emit_pointer_move(10, 20)
    source.emit_pointer_down()
    source.emit_pointer_move(5, 20)
    source.emit_pointer_up()
    source.emit_wheel(-120)

    assert listener.events == [
        ('move', 10.0, 20.0),
        ('start', 10.0, 20.0),
        ('move', 5.0, 20.0),
        ('end',),
        ('wheel', 5.0, 20.0, -120),
    ]


def test_pointer_down_with_position_updates_pointer():
    source = InputSource()
    source.emit_pointer_down(3, 4)
    assert source.pointer == PointerPosition(3, 4)
    assert source.pointer_down


def test_pointer_leave_ends_gesture():
    source = InputSource()
    listener = RecordingListener()
    source.subscribe(listener)

    source.emit_pointer_down(1, 1)
    source.emit_pointer_leave()

    assert listener.events[-1] == ('end',)
    assert not source.pointer_down


def test_subscribe_is_idempotent_and_unsubscribe_stops_delivery():
    source = InputSource()
    listener = RecordingListener()
    source.subscribe(listener)
    source.subscribe(listener)
    assert source.listeners == [listener]

    source.unsubscribe(listener)
    source.emit_pointer_move(1, 1)

    assert listener.events == []
