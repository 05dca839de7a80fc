#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from logging import Logger, getLogger
from typing import TYPE_CHECKING, Final, NoReturn

from ._exceptions import (
    InvalidConfiguration,
    ProtocolViolation,
    QueueEmpty,
    TaskFailure,
)
from ._tasks import Task
from .lowlevel import ROUND_DELAY_BY_DEFAULT, create_delay
from .meta import DEFAULT, DefaultType

if TYPE_CHECKING:
    from typing import Union

    from ._queue import BoundedQueue
    from ._tasks import StepResult
    from .lowlevel import Delay

    if sys.version_info >= (3, 9):
        from collections.abc import Callable, Iterable
    else:
        from typing import Callable, Iterable

    if sys.version_info >= (3, 10):
        from typing import TypeAlias
    else:
        from typing_extensions import TypeAlias

    _TaskLike: TypeAlias = Union[Task, Callable[[], StepResult]]

LOGGER: Final[Logger] = getLogger(__name__)


class CooperativeScheduler:
    """
    Runs tasks round-robin on the calling thread.

    Each round takes a snapshot of the admitted tasks in admission order and
    gives every one of them exactly one step. Tasks that complete or fail are
    removed; tasks admitted during a round first run in the next one. The
    scheduler stops when no tasks are left, which is its only termination
    condition: a step that never returns hangs it, and a task that never
    completes keeps it running. To stop early, let the steps check a flag
    that you set from outside.

    Between rounds the scheduler calls its *delay* strategy: :data:`None`
    for no delay, a number of seconds to sleep, or any zero-argument
    callable (such as a fake clock in tests). By default, the value of the
    ``COOPKIT_ROUND_DELAY`` environment variable is used.

    If *feed* is given, every round starts by taking all available items
    (tasks or step callables) from that queue without blocking, admitting
    them and marking them done. This is the only point where other threads
    may hand tasks to the scheduler; the scheduler itself must be driven from
    a single thread and does no locking.

    Example:
        >>> output = []
        >>> def printer(name):
        ...     lines = iter([f'{name}0', f'{name}1'])
        ...     def step():
        ...         line = next(lines, None)
        ...         if line is None:
        ...             return Step.COMPLETED
        ...         output.append(line)
        ...         return Step.SUSPENDED
        ...     return step
        >>> scheduler = CooperativeScheduler(delay=None)
        >>> scheduler.schedule([printer("A"), printer("B")])
        []
        >>> output
        ['A0', 'B0', 'A1', 'B1']
    """

    __slots__ = (
        "__weakref__",
        "_delay",
        "_feed",
        "_rounds",
        "_running",
        "_steps",
        "_tasks",
    )

    def __init__(
        self,
        /,
        *,
        delay: Delay | DefaultType = DEFAULT,
        feed: BoundedQueue[_TaskLike] | None = None,
    ) -> None:
        if delay is DEFAULT:
            delay = ROUND_DELAY_BY_DEFAULT

        self._delay = create_delay(delay)
        self._feed = feed

        self._rounds = 0
        self._running = False
        self._steps = 0
        self._tasks = {}

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._running:
            extra = f"running, tasks={len(self._tasks)}"
        else:
            extra = f"idle, tasks={len(self._tasks)}"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if there are tasks left to run.
        """

        return bool(self._tasks)

    def __len__(self, /) -> int:
        """
        Returns the number of tasks left to run.
        """

        return len(self._tasks)

    def add(self, task: _TaskLike, /, *, name: str | None = None) -> Task:
        """
        Admit *task* (or a step callable, wrapped into a new task called
        *name*) and return it.

        Raises :exc:`~coopkit.ProtocolViolation` if the task is already
        admitted (here or by another scheduler) or has already finished.
        """

        task = self._check(task, name)

        self._admit(task)

        return task

    def _check(self, task: _TaskLike, name: str | None, /) -> Task:
        if not isinstance(task, Task):
            task = Task(task, name=name)
        elif name is not None:
            msg = "name can only be given together with a step callable"
            raise InvalidConfiguration(msg)

        if task.done():
            msg = f"{task.name} has already finished"
            raise ProtocolViolation(msg)

        if task._owner is self:
            msg = f"{task.name} is already scheduled"
            raise ProtocolViolation(msg)

        if task._owner is not None:
            msg = f"{task.name} is already scheduled by another scheduler"
            raise ProtocolViolation(msg)

        return task

    def _admit(self, task: Task, /) -> None:
        task._owner = self

        self._tasks[task.ident] = task

        LOGGER.debug("admitted %r", task)

    def _remove(self, task: Task, /) -> bool:
        if self._tasks.pop(task.ident, None) is None:
            return False

        task._owner = None

        return True

    def discard(self, task: Task, /) -> bool:
        """
        Remove *task* without running it again. Safe to call from a step.

        Returns :data:`True` if the task was there.
        """

        return self._remove(task)

    def _admit_from_feed(self, /) -> None:
        feed = self._feed

        if feed is None:
            return

        while True:
            try:
                item = feed.get(blocking=False)
            except QueueEmpty:
                break

            try:
                self.add(item)
            finally:
                feed.mark_done()

    def _run_round(self, /) -> list[TaskFailure]:
        tasks = self._tasks
        failures = []

        for task in list(tasks.values()):
            if task.ident not in tasks:
                continue  # discarded during this round

            failure = task.step()

            self._steps += 1

            if failure is not None:
                LOGGER.error(
                    "%s failed in step %d",
                    task.name,
                    task.steps,
                    exc_info=failure.__cause__,
                )

                failures.append(failure)

            if task.done():
                self._remove(task)

        self._rounds += 1

        return failures

    def run_round(self, /) -> list[TaskFailure]:
        """
        Admit tasks from the feed, then give every task exactly one step.

        Returns the failures of this round.
        """

        self._admit_from_feed()

        return self._run_round()

    def schedule(
        self,
        tasks: Iterable[_TaskLike] = (),
        /,
    ) -> list[TaskFailure]:
        """
        Admit *tasks*, then run rounds until no tasks are left.

        Either all of *tasks* are admitted or, if any of them is rejected,
        none of them.

        Returns the failures of all tasks that failed during the run, in the
        order they happened. Failed tasks are removed; the remaining ones keep
        running.
        """

        if self._running:
            msg = "this scheduler is already running"
            raise ProtocolViolation(msg)

        self._running = True

        try:
            admitted = {}

            for task in tasks:
                task = self._check(task, None)

                if task.ident in admitted:
                    msg = f"{task.name} is given more than once"
                    raise ProtocolViolation(msg)

                admitted[task.ident] = task

            for task in admitted.values():
                self._admit(task)

            delay = self._delay
            rounds = self._rounds
            steps = self._steps

            failures = []

            while True:
                self._admit_from_feed()

                if not self._tasks:
                    break

                if delay is not None and self._rounds > rounds:
                    delay()

                failures.extend(self._run_round())

            LOGGER.debug(
                "finished after %d rounds and %d steps with %d failures",
                self._rounds - rounds,
                self._steps - steps,
                len(failures),
            )
        finally:
            self._running = False

        return failures

    @property
    def tasks(self, /) -> tuple[Task, ...]:
        """
        The tasks left to run, in admission order.
        """

        return tuple(self._tasks.values())

    @property
    def rounds(self, /) -> int:
        """
        The total number of rounds run so far.
        """

        return self._rounds

    @property
    def steps(self, /) -> int:
        """
        The total number of steps run so far.
        """

        return self._steps

    @property
    def running(self, /) -> bool:
        return self._running
