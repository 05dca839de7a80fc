#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._tasks import Task


class InvalidConfiguration(ValueError):
    """
    Raised eagerly when a primitive is constructed or configured with values
    it cannot work with, such as a queue capacity of zero.
    """


class ProtocolViolation(RuntimeError):
    """
    Raised at the call that breaks the usage protocol of a primitive: releasing
    a mutex that the current thread does not hold, marking more items done than
    were put, admitting the same task twice, and so on.

    It signals a programming error and is never meant to be retried.
    """


class TaskFailure(Exception):
    """
    Describes a task that failed during a step.

    Instances are collected by the scheduler and returned to its caller after
    the run. When the step raised, the original exception is available as
    ``__cause__``.
    """

    def __init__(self, /, task: Task, reason: object) -> None:
        super().__init__(task, reason)

        self.task = task
        self.reason = reason

    def __str__(self, /) -> str:
        return f"{self.task.name} failed: {self.reason!r}"


class QueueEmpty(Exception):
    """Raised by a non-blocking get from an empty queue."""


class QueueFull(Exception):
    """Raised by a non-blocking put to a full queue."""
