#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pickle
import threading
import time

import pytest

import coopkit


def _wait_for(predicate, timeout=5):
    deadline = time.monotonic() + timeout

    while not predicate():
        if time.monotonic() > deadline:
            pytest.fail("timed out waiting for the condition")

        time.sleep(0.001)


class TestBoundedQueue:
    factory = coopkit.BoundedQueue

    @pytest.mark.parametrize("maxsize", [0, -1])
    def test_non_positive_capacity(self, /, maxsize):
        with pytest.raises(coopkit.InvalidConfiguration, match=">= 1"):
            self.factory(maxsize)

    @pytest.mark.parametrize("maxsize", [None, 1.5, "1", True])
    def test_non_integer_capacity(self, /, maxsize):
        with pytest.raises(coopkit.InvalidConfiguration, match="integer"):
            self.factory(maxsize)

    def test_invalid_configuration_is_value_error(self, /):
        with pytest.raises(ValueError):
            self.factory(0)

    def test_base(self, /):
        queue = self.factory(3)

        assert queue.maxsize == 3
        assert len(queue) == 0
        assert not queue
        assert queue.unfinished == 0
        assert queue.waiting == 0

        queue.put("spam")

        assert len(queue) == 1
        assert queue
        assert queue.unfinished == 1

        assert queue.get() == "spam"

        assert len(queue) == 0
        assert queue.unfinished == 1

    def test_repr(self, /):
        queue = self.factory(1)

        assert repr(queue).startswith("<coopkit.BoundedQueue(maxsize=1) at ")
        assert repr(queue).endswith("[length=0, getting=0]>")

        queue.put(1)

        assert repr(queue).endswith("[length=1, putting=0]>")

    def test_fifo(self, /):
        queue = self.factory(5)

        for item in range(5):
            queue.put(item)

        assert [queue.get() for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_non_blocking(self, /):
        queue = self.factory(1)

        with pytest.raises(coopkit.QueueEmpty):
            queue.get(blocking=False)

        queue.put(1, blocking=False)

        with pytest.raises(coopkit.QueueFull):
            queue.put(2, blocking=False)

        assert len(queue) == 1
        assert queue.unfinished == 1
        assert queue.get(blocking=False) == 1

    def test_get_blocks_until_put(self, /):
        queue = self.factory(1)
        result = []

        consumer = threading.Thread(target=lambda: result.append(queue.get()))
        consumer.start()

        _wait_for(lambda: queue.getting == 1)

        assert not result

        queue.put("item")
        consumer.join()

        assert result == ["item"]
        assert queue.getting == 0

    def test_put_blocks_until_get(self, /):
        queue = self.factory(1)
        queue.put(1)

        producer = threading.Thread(target=queue.put, args=(2,))
        producer.start()

        _wait_for(lambda: queue.putting == 1)

        assert len(queue) == 1

        assert queue.get() == 1

        producer.join()

        assert queue.get() == 2

    def test_capacity_one_handoff(self, /):
        queue = self.factory(1)
        consumed = []
        blocked = []

        def producer():
            for item in (1, 2, 3):
                queue.put(item)

        def consumer():
            for _ in range(2):
                # the producer is stuck on the next item until we take one
                _wait_for(lambda: queue.putting == 1)
                blocked.append(len(queue))
                consumed.append(queue.get())

            consumed.append(queue.get())

        threads = [
            threading.Thread(target=producer),
            threading.Thread(target=consumer),
        ]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert consumed == [1, 2, 3]
        assert blocked == [1, 1]
        assert len(queue) == 0

    def test_mark_done_and_join(self, /):
        queue = self.factory(3)
        joined = threading.Event()

        for item in range(3):
            queue.put(item)

        joiner = threading.Thread(target=lambda: (queue.join(), joined.set()))
        joiner.start()

        for _ in range(3):
            queue.get()

        assert not joined.wait(0.05)

        queue.mark_done()
        queue.mark_done()

        assert not joined.wait(0.05)
        assert queue.unfinished == 1

        queue.mark_done()
        joiner.join()

        assert joined.is_set()
        assert queue.unfinished == 0

    def test_join_without_items(self, /):
        queue = self.factory(1)

        queue.join()

    def test_extra_mark_done(self, /):
        queue = self.factory(2)

        with pytest.raises(coopkit.ProtocolViolation):
            queue.mark_done()

        queue.put(1)
        queue.get()
        queue.mark_done()

        with pytest.raises(coopkit.ProtocolViolation):
            queue.mark_done()

        assert queue.unfinished == 0

    def test_pickling(self, /):
        queue = self.factory(2)
        queue.put(1)

        copy = pickle.loads(pickle.dumps(queue))

        assert copy.maxsize == 2
        assert len(copy) == 0

    @pytest.mark.parametrize("maxsize", [1, 2, 5])
    def test_producers_and_consumers(self, /, maxsize):
        queue = self.factory(maxsize)
        producers = 3
        items = 200
        overfilled = []
        received = [[] for _ in range(producers)]

        def produce(index):
            for number in range(items):
                queue.put((index, number))

                if len(queue) > maxsize:
                    overfilled.append(len(queue))

        def consume(index):
            for _ in range(items):
                producer, number = queue.get()
                received[producer].append(number)
                queue.mark_done()

        group = coopkit.ParallelWorkerGroup(producers)
        consumers = threading.Thread(target=group.run, args=(consume,))
        consumers.start()

        coopkit.ParallelWorkerGroup(producers).run(produce)
        queue.join()
        consumers.join()

        assert not overfilled
        assert queue.unfinished == 0
        # every item arrives exactly once
        for numbers in received:
            assert sorted(numbers) == list(range(items))

    def test_per_producer_order(self, /):
        queue = self.factory(2)
        received = []

        def consume():
            for _ in range(300):
                received.append(queue.get())

        consumer = threading.Thread(target=consume)
        consumer.start()

        def produce(index):
            for number in range(100):
                queue.put((index, number))

        coopkit.ParallelWorkerGroup(3).run(produce)
        consumer.join()

        for index in range(3):
            numbers = [number for owner, number in received if owner == index]
            assert numbers == list(range(100))

    def test_put_and_get_threadsafe(self, test_thread_safety):
        queue = self.factory(2)

        def f():
            queue.put(object())
            queue.get()
            queue.mark_done()

            assert 0 <= len(queue) <= 2

        test_thread_safety(f, f)

        assert len(queue) == 0
        assert queue.unfinished == 0
        assert queue.waiting == 0
