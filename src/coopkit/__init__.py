#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Minimal concurrency runtime for Python

This package combines two concurrency models that are kept strictly apart:

* cooperative multitasking on a single thread, where tasks are explicit state
  machines that suspend only when they return from a step and are run
  round-robin by :class:`CooperativeScheduler`
* parallel multitasking on OS threads, where shared state is guarded by
  :class:`Mutex` (or :class:`SharedCell`) and work is handed over through
  :class:`BoundedQueue`

:class:`ParallelWorkerGroup` runs a callable on a fixed number of threads and
is used to check that the synchronization primitives actually protect shared
state.
"""

__author__: str = "Ilya Egorov <0x42005e1f@gmail.com>"
__version__: str = "0.1.0"

from . import (  # noqa: F401
    lowlevel,
    meta,
)
from ._decorator import (
    synchronized as synchronized,
)
from ._exceptions import (
    InvalidConfiguration as InvalidConfiguration,
    ProtocolViolation as ProtocolViolation,
    QueueEmpty as QueueEmpty,
    QueueFull as QueueFull,
    TaskFailure as TaskFailure,
)
from ._mutex import (
    Mutex as Mutex,
    SharedCell as SharedCell,
)
from ._queue import (
    BoundedQueue as BoundedQueue,
)
from ._scheduler import (
    CooperativeScheduler as CooperativeScheduler,
)
from ._tasks import (
    Failed as Failed,
    Step as Step,
    Task as Task,
    TaskStatus as TaskStatus,
)
from ._workers import (
    ParallelWorkerGroup as ParallelWorkerGroup,
    count_in_parallel as count_in_parallel,
)

# prepare for external use
meta.export(globals())
