#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys
import threading

from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final, NoReturn, TypeVar

from ._exceptions import InvalidConfiguration, ProtocolViolation
from ._mutex import SharedCell
from .lowlevel import checkpoint, create_thread_lock

if sys.version_info < (3, 11):
    from exceptiongroup import BaseExceptionGroup

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Callable
    else:
        from typing import Callable

LOGGER: Final[Logger] = getLogger(__name__)

_T = TypeVar("_T")


def _check_count(name: str, value: int, minimum: int, /) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, got {value!r}"
        raise InvalidConfiguration(msg)

    if value < minimum:
        msg = f"{name} must be >= {minimum}, got {value!r}"
        raise InvalidConfiguration(msg)


class ParallelWorkerGroup:
    """
    A fixed number of threads that run the same callable in parallel.

    :meth:`run` starts all workers, releases them at once, and waits for every
    one of them before it returns. Anything that the workers share must be
    guarded by a :class:`~coopkit.Mutex` or passed through a
    :class:`~coopkit.BoundedQueue`.

    Example:
        >>> group = ParallelWorkerGroup(3)
        >>> group.run(lambda index: index * 10)
        [0, 10, 20]
    """

    __slots__ = (
        "__weakref__",
        "_active_lock",
        "_running",
        "_size",
    )

    def __init__(self, /, size: int) -> None:
        _check_count("size", size, 1)

        self._active_lock = create_thread_lock()
        self._running = False
        self._size = size

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}({self._size!r})"

        if self._running:
            extra = "running"
        else:
            extra = "idle"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def run(
        self,
        func: Callable[..., _T],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> list[_T]:
        """
        Call ``func(index, *args, **kwargs)`` in each of the workers, where
        *index* is the worker number starting from zero, and return the
        results in worker order.

        If any worker raised, the exceptions of all failed workers are raised
        together as a :exc:`BaseExceptionGroup` once every worker has
        finished.
        """

        with self._active_lock:
            if self._running:
                msg = "this worker group is already running"
                raise ProtocolViolation(msg)

            self._running = True

        try:
            return self._run(func, args, kwargs)
        finally:
            self._running = False

    def _run(
        self,
        func: Callable[..., _T],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        /,
    ) -> list[_T]:
        gate = threading.Event()
        results = [None] * self._size
        exceptions = [None] * self._size

        def work(index: int) -> None:
            gate.wait()

            try:
                results[index] = func(index, *args, **kwargs)
            except BaseException as exc:  # noqa: BLE001
                exceptions[index] = exc

        threads = [
            threading.Thread(
                target=work,
                args=(index,),
                name=f"coopkit-worker-{index}",
                daemon=True,
            )
            for index in range(self._size)
        ]
        started = []

        try:
            for thread in threads:
                thread.start()
                started.append(thread)
        finally:
            gate.set()

            for thread in started:
                thread.join()

        failed = []

        for index, exc in enumerate(exceptions):
            if exc is not None:
                LOGGER.error("worker %d failed", index, exc_info=exc)

                failed.append(exc)

        if failed:
            msg = "unhandled errors in a worker group"
            raise BaseExceptionGroup(msg, failed)

        return results

    @property
    def size(self, /) -> int:
        return self._size

    @property
    def running(self, /) -> bool:
        return self._running


def _increment(counter: SharedCell[int], /) -> None:
    value = counter.value
    checkpoint(force=True)  # let another thread in between read and write
    counter.value = value + 1


def count_in_parallel(
    workers: int,
    iterations: int,
    /,
    *,
    use_lock: bool = True,
) -> int:
    """
    Let *workers* threads increment a shared counter *iterations* times each
    and return the final value.

    With *use_lock* (the default), every increment holds the counter's mutex
    and the result is always ``workers * iterations``. Without it, updates
    get lost whenever two workers interleave between reading and writing the
    counter; this mode exists only to show that the race is real.

    Example:
        >>> count_in_parallel(4, 100)
        400
    """

    _check_count("workers", workers, 1)
    _check_count("iterations", iterations, 0)

    counter = SharedCell(0)

    def work(index: int) -> None:
        if use_lock:
            for _ in range(iterations):
                with counter:
                    _increment(counter)
        else:
            for _ in range(iterations):
                _increment(counter)

    ParallelWorkerGroup(workers).run(work)

    return counter.value
