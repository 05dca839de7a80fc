#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._exceptions import (
    InvalidConfiguration,
    ProtocolViolation,
    QueueEmpty,
    QueueFull,
)
from .lowlevel import ThreadWaiter, checkpoint, create_thread_lock

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_T = TypeVar("_T")


class BoundedQueue(Generic[_T]):
    """
    A fixed-capacity FIFO channel for handing items between threads.

    :meth:`put` blocks while the queue is full, :meth:`get` blocks while it is
    empty; neither spins. Items come out in exactly the order they were
    accepted. Every accepted item counts as unfinished until a consumer calls
    :meth:`mark_done` for it, and :meth:`join` waits for that count to drop
    to zero.

    There is no built-in timeout: wrap the calls in your own deadline logic
    if you need bounded waiting, or use ``blocking=False``.

    Example:
        >>> items = BoundedQueue(2)
        >>> items.put('spam')
        >>> items.put('eggs')
        >>> items.get(), items.get()
        ('spam', 'eggs')
        >>> items.mark_done()
        >>> items.mark_done()
        >>> items.join()  # returns immediately
    """

    __slots__ = (
        "__weakref__",
        "_data",
        "_getters",
        "_joiners",
        "_lock",
        "_maxsize",
        "_putters",
        "_unfinished",
    )

    def __new__(cls, /, maxsize: int) -> Self:
        """..."""

        if isinstance(maxsize, bool) or not isinstance(maxsize, int):
            msg = f"maxsize must be an integer, got {maxsize!r}"
            raise InvalidConfiguration(msg)

        if maxsize < 1:
            msg = f"maxsize must be >= 1, got {maxsize!r}"
            raise InvalidConfiguration(msg)

        self = object.__new__(cls)

        self._data = deque()
        self._lock = create_thread_lock()  # guards all the fields below
        self._maxsize = maxsize
        self._unfinished = 0

        self._putters = deque()
        self._getters = deque()
        self._joiners = []

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new (empty) instances
        with the same capacity.

        The current state does not affect the arguments.
        """

        return (self._maxsize,)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}(maxsize={self._maxsize!r})"

        length = len(self._data)

        if length >= self._maxsize:
            extra = f"length={length}, putting={len(self._putters)}"
        elif length > 0:
            extra = f"length={length}"
        else:
            extra = f"length={length}, getting={len(self._getters)}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the queue is not empty.
        """

        return bool(self._data)

    def __len__(self, /) -> int:
        """
        Returns the number of items in the queue.
        """

        return len(self._data)

    def _wake_one(self, /, waiters: deque[ThreadWaiter]) -> None:
        # must be called with the lock held
        if waiters:
            waiters.popleft().wake()

    def _forget(
        self,
        /,
        waiters: deque[ThreadWaiter],
        waiter: ThreadWaiter,
    ) -> None:
        with self._lock:
            try:
                waiters.remove(waiter)
            except ValueError:
                # the waiter has been woken up but will not use its turn, so
                # the wake-up goes to the next one
                self._wake_one(waiters)

    def put(self, /, item: _T, *, blocking: bool = True) -> None:
        """
        Append *item* at the tail, blocking while the queue is full.

        With *blocking* set to false, raises :exc:`~coopkit.QueueFull`
        instead of waiting.
        """

        waited = False

        while True:
            with self._lock:
                if len(self._data) < self._maxsize:
                    self._data.append(item)
                    self._unfinished += 1

                    self._wake_one(self._getters)

                    break

                if not blocking:
                    raise QueueFull

                self._putters.append(waiter := ThreadWaiter())

            waited = True

            try:
                waiter.wait()
            except BaseException:
                self._forget(self._putters, waiter)
                raise

        if blocking and not waited:
            checkpoint()

    def get(self, /, *, blocking: bool = True) -> _T:
        """
        Remove and return the item at the head, blocking while the queue is
        empty.

        With *blocking* set to false, raises :exc:`~coopkit.QueueEmpty`
        instead of waiting.
        """

        waited = False

        while True:
            with self._lock:
                if self._data:
                    item = self._data.popleft()

                    self._wake_one(self._putters)

                    break

                if not blocking:
                    raise QueueEmpty

                self._getters.append(waiter := ThreadWaiter())

            waited = True

            try:
                waiter.wait()
            except BaseException:
                self._forget(self._getters, waiter)
                raise

        if blocking and not waited:
            checkpoint()

        return item

    def mark_done(self, /) -> None:
        """
        Tell the queue that the processing of one delivered item is complete.

        Raises :exc:`~coopkit.ProtocolViolation` if called more times than
        there were items put.
        """

        with self._lock:
            if self._unfinished <= 0:
                msg = "mark_done() called more times than there were items"
                raise ProtocolViolation(msg)

            self._unfinished -= 1

            if not self._unfinished:
                joiners, self._joiners = self._joiners, []

                for waiter in joiners:
                    waiter.wake()

    def join(self, /) -> None:
        """
        Block until every item that was put has been marked done.
        """

        with self._lock:
            if not self._unfinished:
                return

            self._joiners.append(waiter := ThreadWaiter())

        try:
            waiter.wait()
        except BaseException:
            with self._lock:
                try:
                    self._joiners.remove(waiter)
                except ValueError:  # already woken up
                    pass

            raise

    @property
    def maxsize(self, /) -> int:
        """
        The capacity of the queue.
        """

        return self._maxsize

    @property
    def unfinished(self, /) -> int:
        """
        The number of items that were put but not yet marked done.
        """

        return self._unfinished

    @property
    def putting(self, /) -> int:
        """
        The current number of threads waiting to put.
        """

        return len(self._putters)

    @property
    def getting(self, /) -> int:
        """
        The current number of threads waiting to get.
        """

        return len(self._getters)

    @property
    def waiting(self, /) -> int:
        """
        The current number of threads waiting to put or get.
        """

        return len(self._putters) + len(self._getters)
