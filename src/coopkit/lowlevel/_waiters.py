#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from _thread import TIMEOUT_MAX
from math import inf, isinf, isnan
from typing import Any, NoReturn, final

from ._threads import create_thread_lock


def check_timeout(timeout: float | None, /) -> float | None:
    """
    Validate *timeout* and normalize it: infinity becomes :data:`None`.
    """

    if timeout is None:
        return None

    if isinstance(timeout, int):
        try:
            timeout = float(timeout)
        except OverflowError:
            timeout = (-1 if timeout < 0 else 1) * inf

    if isnan(timeout):
        msg = "timeout must be non-NaN"
        raise ValueError(msg)

    if timeout < 0:
        msg = "timeout must be non-negative"
        raise ValueError(msg)

    if isinf(timeout):
        return None

    return timeout


@final
class ThreadWaiter:
    """
    A one-shot parking spot for a single thread.

    The waiter owns a raw thread lock that is acquired on creation; the
    waiting thread blocks on a second acquisition, and any other thread
    releases it to wake the waiting one up. A wake-up that happens before the
    wait is not lost.
    """

    __slots__ = ("__lock",)

    def __init__(self, /) -> None:
        self.__lock = create_thread_lock()
        self.__lock.acquire()

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        bcs = ThreadWaiter
        bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

        msg = f"type '{bcs_repr}' is not an acceptable base type"
        raise TypeError(msg)

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def wait(self, /, timeout: float | None = None) -> bool:
        """
        Block until :meth:`wake` is called or *timeout* seconds pass.

        Returns :data:`True` if the waiter was woken up.
        """

        timeout = check_timeout(timeout)

        if timeout is None:
            return self.__lock.acquire()

        if timeout:
            return self.__lock.acquire(True, min(timeout, TIMEOUT_MAX))

        return self.__lock.acquire(False)

    def wake(self, /) -> None:
        try:
            self.__lock.release()
        except RuntimeError:  # already woken up
            pass
