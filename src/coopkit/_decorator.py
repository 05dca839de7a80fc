#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, Final, TypeVar

from wrapt import FunctionWrapper, decorator

from ._mutex import Mutex
from .lowlevel import create_thread_lock

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_CallableT = TypeVar("_CallableT", bound=Callable[..., Any])


class _MutexSynchronizer:
    __slots__ = (
        "_mutex",
        "_synchronized",
    )

    def __init__(self, /, mutex: Mutex) -> None:
        self._mutex = mutex

        @decorator
        def _synchronized(wrapped, instance, args, kwargs, /):
            with mutex:
                return wrapped(*args, **kwargs)

        self._synchronized = _synchronized

    def __enter__(self, /) -> Self:
        self._mutex.acquire()

        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._mutex.release()

    def __call__(self, wrapped: _CallableT, /) -> _CallableT:
        if not callable(wrapped):
            msg = f"a callable was expected, got {wrapped!r}"
            raise TypeError(msg)

        return self._synchronized(wrapped)


_synchronized_meta_lock: Final = create_thread_lock()


def _synchronized_mutex(context: object, /) -> Mutex:
    mutex = getattr(context, "_synchronized_mutex", None)

    if mutex is None:
        with _synchronized_meta_lock:
            mutex = getattr(context, "_synchronized_mutex", None)

            if mutex is None:  # first use
                mutex = Mutex()
                context._synchronized_mutex = mutex

    return mutex


class __SynchronizedDecoratorImpl(FunctionWrapper):
    __slots__ = ("__mutex",)

    def __enter__(self, /):
        self.__mutex = _synchronized_mutex(self.__wrapped__)

        self.__mutex.acquire()

        return self

    def __exit__(self, /, exc_type, exc_value, traceback):
        self.__mutex.release()


def __synchronized_wrapper(wrapped, instance, args, kwargs, /):
    if instance is not None:
        context = instance
    else:
        context = wrapped

    with _synchronized_mutex(context):
        return wrapped(*args, **kwargs)


@overload
def synchronized(wrapped: Mutex, /) -> _MutexSynchronizer: ...
@overload
def synchronized(wrapped: _CallableT, /) -> _CallableT: ...
def synchronized(wrapped, /):
    """
    Guard a callable (or a block of code) with a :class:`~coopkit.Mutex`.

    Given a mutex, returns an object that works both as a decorator and as a
    context manager:

        >>> mutex = Mutex()
        >>> @synchronized(mutex)
        ... def increment(cell):
        ...     cell.value += 1

    Given a function or a method, wraps it so that every call holds a mutex
    created on first use: one per instance for methods, one per function
    otherwise. The mutex is stored as ``_synchronized_mutex``, so classes
    that define :ref:`slots` must reserve that name.

    The mutex is not reentrant: a synchronized method that calls another
    synchronized method of the same instance raises
    :exc:`~coopkit.ProtocolViolation`.
    """

    if isinstance(wrapped, Mutex):
        return _MutexSynchronizer(wrapped)

    if not callable(wrapped):
        msg = f"a mutex or a callable was expected, got {wrapped!r}"
        raise TypeError(msg)

    return __SynchronizedDecoratorImpl(
        wrapped=wrapped,
        wrapper=__synchronized_wrapper,
    )
