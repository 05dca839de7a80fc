#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pickle
import threading

from math import inf, nan

import pytest

from coopkit.lowlevel import ThreadWaiter, check_timeout


class TestThreadWaiter:
    factory = ThreadWaiter

    def test_wake_before_wait(self, /):
        waiter = self.factory()
        waiter.wake()

        assert waiter.wait()

    def test_double_wake(self, /):
        waiter = self.factory()
        waiter.wake()
        waiter.wake()

        assert waiter.wait(0)

    def test_timeout(self, /):
        waiter = self.factory()

        assert not waiter.wait(0)
        assert not waiter.wait(0.01)

    def test_wake_from_another_thread(self, /):
        waiter = self.factory()
        timer = threading.Timer(0.01, waiter.wake)
        timer.start()

        try:
            assert waiter.wait(5)
        finally:
            timer.join()

    def test_invalid_timeout(self, /):
        waiter = self.factory()

        with pytest.raises(ValueError):
            waiter.wait(-1)

    def test_pickling(self, /):
        with pytest.raises(TypeError):
            pickle.dumps(self.factory())

    def test_inheritance(self, /):
        with pytest.raises(TypeError):

            class MyWaiter(ThreadWaiter):
                pass


class TestCheckTimeout:
    @pytest.mark.parametrize(
        ("timeout", "expected"),
        [
            (None, None),
            (0, 0.0),
            (1, 1.0),
            (0.5, 0.5),
            (inf, None),
            (10**400, None),
        ],
    )
    def test_valid(self, /, timeout, expected):
        assert check_timeout(timeout) == expected

    @pytest.mark.parametrize("timeout", [-1, -0.5, -inf, nan, -(10**400)])
    def test_invalid(self, /, timeout):
        with pytest.raises(ValueError):
            check_timeout(timeout)
