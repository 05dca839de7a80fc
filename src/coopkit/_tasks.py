#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import enum
import sys

from itertools import count
from typing import TYPE_CHECKING, Any, NoReturn, Union, final

from ._exceptions import InvalidConfiguration, ProtocolViolation, TaskFailure

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    if sys.version_info >= (3, 10):
        from typing import TypeAlias
    else:
        from typing_extensions import TypeAlias


class Step(enum.Enum):
    """
    What a task step reports back when it returns normally.
    """

    SUSPENDED = "suspended"
    COMPLETED = "completed"


@final
class Failed:
    """
    What a task step returns to report an unrecoverable error without
    raising.

    Example:
        >>> Failed('disk is full')
        coopkit.Failed('disk is full')
    """

    __slots__ = ("reason",)

    def __init__(self, /, reason: object) -> None:
        self.reason = reason

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        bcs = Failed
        bcs_repr = f"{bcs.__module__}.{bcs.__qualname__}"

        msg = f"type '{bcs_repr}' is not an acceptable base type"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        return f"{cls_repr}({self.reason!r})"

    def __eq__(self, /, other: object) -> bool:
        if isinstance(other, Failed):
            return self.reason == other.reason

        return NotImplemented

    def __hash__(self, /) -> int:
        return hash((Failed, self.reason))


StepResult: TypeAlias = Union[Step, Failed]


class TaskStatus(enum.Enum):
    READY = "ready"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAILED = "failed"


_idents = count(1)


class Task:
    """
    A unit of cooperative work.

    A task wraps a *step* callable that takes no arguments, does a bounded
    amount of work, and returns :data:`Step.SUSPENDED` to be resumed later,
    :data:`Step.COMPLETED` when it is finished, or :class:`Failed` to report
    an error. Between steps all state lives outside of the call, typically in
    the object that *step* is bound to, so resuming is just calling *step*
    again:

        >>> class Countdown:
        ...     def __init__(self, n):
        ...         self.n = n
        ...     def step(self):
        ...         self.n -= 1
        ...         return Step.SUSPENDED if self.n else Step.COMPLETED
        >>> task = Task(Countdown(2).step, name='countdown')
        >>> task.step(), task.status.value
        (None, 'suspended')
        >>> task.step(), task.status.value
        (None, 'completed')

    A step must not block: the whole scheduler waits for it.
    """

    __slots__ = (
        "__weakref__",
        "_ident",
        "_name",
        "_owner",
        "_status",
        "_step",
        "_steps",
    )

    def __init__(
        self,
        /,
        step: Callable[[], StepResult],
        *,
        name: str | None = None,
    ) -> None:
        if not callable(step):
            msg = f"step must be callable, got {step!r}"
            raise InvalidConfiguration(msg)

        self._ident = next(_idents)

        if name is None:
            name = f"Task-{self._ident}"

        self._name = name
        self._owner = None  # the scheduler that admitted the task
        self._status = TaskStatus.READY
        self._step = step
        self._steps = 0

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        object_repr = f"{cls_repr}(name={self._name!r})"
        extra = f"{self._status.value}, steps={self._steps}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def _fail(self, /, reason: object) -> TaskFailure:
        self._status = TaskStatus.FAILED

        failure = TaskFailure(self, reason)

        if isinstance(reason, BaseException):
            failure.__cause__ = reason

        return failure

    def step(self, /) -> TaskFailure | None:
        """
        Run exactly one step.

        Returns :data:`None` if the task suspended or completed, and a
        :exc:`~coopkit.TaskFailure` (without raising it) if the step raised
        an exception, returned :class:`Failed`, or returned something that is
        not a step result.
        """

        if self._status is TaskStatus.COMPLETED:
            msg = f"{self._name} has already completed"
            raise ProtocolViolation(msg)

        if self._status is TaskStatus.FAILED:
            msg = f"{self._name} has already failed"
            raise ProtocolViolation(msg)

        self._status = TaskStatus.READY
        self._steps += 1

        try:
            result = self._step()
        except Exception as exc:  # noqa: BLE001
            return self._fail(exc)

        if result is Step.SUSPENDED:
            self._status = TaskStatus.SUSPENDED
        elif result is Step.COMPLETED:
            self._status = TaskStatus.COMPLETED
        elif isinstance(result, Failed):
            return self._fail(result.reason)
        else:
            msg = f"step returned {result!r} instead of a Step or Failed"
            return self._fail(TypeError(msg))

        return None

    def done(self, /) -> bool:
        """
        Return :data:`True` if the task has completed or failed.
        """

        return self._status in {TaskStatus.COMPLETED, TaskStatus.FAILED}

    @property
    def ident(self, /) -> int:
        return self._ident

    @property
    def name(self, /) -> str:
        return self._name

    @property
    def status(self, /) -> TaskStatus:
        return self._status

    @property
    def steps(self, /) -> int:
        """
        The number of steps the task has run so far.
        """

        return self._steps
