#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._exceptions import ProtocolViolation
from .lowlevel import (
    ThreadWaiter,
    check_timeout,
    checkpoint,
    create_thread_lock,
    current_thread_ident,
)
from .meta import MISSING, MissingType

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

    if sys.version_info >= (3, 9):
        from collections.abc import Callable
    else:
        from typing import Callable

_T = TypeVar("_T")


class Mutex:
    """
    A non-reentrant mutual exclusion lock for threads.

    At most one thread holds the mutex at any instant. Waiting threads are
    served in the order they arrived: :meth:`release` hands the mutex over to
    the first waiter directly, so no waiter can be overtaken indefinitely.

    Misuse (releasing a mutex that the current thread does not hold, or
    acquiring it twice from the same thread) raises
    :exc:`~coopkit.ProtocolViolation`.

    Example:
        >>> counter = 0
        >>> mutex = Mutex()
        >>> with mutex:
        ...     counter += 1
        >>> counter
        1
    """

    __slots__ = (
        "__weakref__",
        "_lock",
        "_owner",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._lock = create_thread_lock()  # guards the fields below
        self._owner = None
        self._waiters = deque()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        A mutex is always recreated unlocked, whoever held the original.
        """

        return ()

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__()

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}()"

        if self._owner is None:
            extra = "unlocked"
        else:
            extra = f"locked, waiting={len(self._waiters)}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the mutex is held by any thread.

        Example:
            >>> writing = Mutex()
            >>> bool(writing)
            False
            >>> with writing:  # mutex is in use
            ...     bool(writing)
            True
            >>> bool(writing)
            False
        """

        return self._owner is not None

    def __enter__(self, /) -> Self:
        """..."""

        self.acquire()

        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self.release()

    def _cancel(self, /, token: tuple[ThreadWaiter, int]) -> bool:
        with self._lock:
            try:
                self._waiters.remove(token)
            except ValueError:  # already handed over
                return False
            else:
                return True

    def acquire(
        self,
        /,
        *,
        blocking: bool = True,
        timeout: float | None = None,
    ) -> bool:
        """
        Acquire the mutex, blocking until it is free.

        Returns :data:`False` only if *blocking* is false and the mutex is
        held by another thread, or if *timeout* seconds passed without
        getting it.
        """

        timeout = check_timeout(timeout)
        thread = current_thread_ident()

        with self._lock:
            if self._owner == thread:
                msg = "the current thread is already holding this mutex"
                raise ProtocolViolation(msg)

            if self._owner is None:
                self._owner = thread

                token = None
            elif blocking:
                self._waiters.append(token := (ThreadWaiter(), thread))
            else:
                return False

        if token is None:
            if blocking:
                try:
                    checkpoint()
                except BaseException:
                    self._release()
                    raise

            return True

        try:
            success = token[0].wait(timeout)
        except BaseException:
            if not self._cancel(token):
                self._release()

            raise

        if not success and not self._cancel(token):
            # the mutex was handed over right after the timeout
            success = True

        return success

    def _release(self, /) -> None:
        with self._lock:
            if self._waiters:
                waiter, self._owner = self._waiters.popleft()
                waiter.wake()
            else:
                self._owner = None

    def release(self, /) -> None:
        """
        Release the mutex and hand it over to the longest-waiting thread.
        """

        owner = self._owner

        if owner is None:
            msg = "release unlocked mutex"
            raise ProtocolViolation(msg)

        if owner != current_thread_ident():
            msg = "the current thread is not holding this mutex"
            raise ProtocolViolation(msg)

        self._release()

    def locked(self, /) -> bool:
        """
        Return :data:`True` if the mutex is held by any thread.
        """

        return self._owner is not None

    def owned(self, /) -> bool:
        """
        Return :data:`True` if the current thread holds the mutex.

        Example:
            >>> mutex = Mutex()
            >>> mutex.owned()
            False
            >>> with mutex:
            ...     mutex.owned()
            True
        """

        return self._owner == current_thread_ident()

    @property
    def owner(self, /) -> int | None:
        """
        The identifier of the thread that holds the mutex, or :data:`None`.
        """

        return self._owner

    @property
    def waiting(self, /) -> int:
        """
        The number of threads waiting to acquire the mutex.
        """

        return len(self._waiters)


class SharedCell(Generic[_T]):
    """
    A value shared between threads together with the mutex that guards it.

    The cell is the handle that workers receive instead of a module-level
    global. Reading or writing :attr:`value` is not synchronized by itself;
    use the cell as a context manager (or :meth:`update`) around every
    read-modify-write.

    Example:
        >>> counter = SharedCell(0)
        >>> with counter:
        ...     counter.value += 1
        >>> counter.update(lambda value: value + 1)
        2
    """

    __slots__ = (
        "__weakref__",
        "_mutex",
        "_value",
    )

    def __new__(
        cls,
        /,
        value: _T,
        *,
        mutex: Mutex | MissingType = MISSING,
    ) -> Self:
        """..."""

        self = object.__new__(cls)

        if mutex is MISSING:
            mutex = Mutex()

        self._mutex = mutex
        self._value = value

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Copies keep the value but get a mutex of their own, unlocked.
        """

        return (self._value,)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        return f"{cls_repr}({self._value!r})"

    def __enter__(self, /) -> Self:
        """..."""

        self._mutex.acquire()

        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self._mutex.release()

    def update(self, /, func: Callable[[_T], _T]) -> _T:
        """
        Replace the value with ``func(value)`` under the mutex and return the
        new value.
        """

        with self._mutex:
            self._value = value = func(self._value)

        return value

    @property
    def value(self, /) -> _T:
        return self._value

    @value.setter
    def value(self, /, value: _T) -> None:
        self._value = value

    @property
    def mutex(self, /) -> Mutex:
        return self._mutex
