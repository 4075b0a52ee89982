import pytest

from loraigate.taskqueue import TaskQueue


def test_empty_queue_is_falsy():
    queue = TaskQueue()
    assert not queue
    assert len(queue) == 0


def test_fifo_order():
    queue = TaskQueue()
    items = ["a", "b", "c"]
    for item in items:
        queue.put(item)
    assert len(queue) == len(items)
    assert [queue.get() for _ in items] == items
    assert not queue


def test_same_object_is_returned():
    queue = TaskQueue()
    obj = {"source": "N0CALL"}
    queue.put(obj)
    assert queue.get() is obj


def test_get_from_empty_raises():
    queue = TaskQueue()
    with pytest.raises(IndexError):
        queue.get()


def test_interleaved_put_get():
    queue = TaskQueue()
    queue.put(1)
    queue.put(2)
    assert queue.get() == 1
    queue.put(3)
    assert queue
    assert [queue.get(), queue.get()] == [2, 3]