#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements building blocks for top-level primitives: thread
identity, raw thread locks, one-shot thread waiters, checkpoints, and the
delay strategies used between scheduler rounds.

You can use its contents to create your own primitives or fine-tune existing
ones.
"""

from ._checkpoints import (
    checkpoint as checkpoint,
    checkpoints_enabled as checkpoints_enabled,
    disable_checkpoints as disable_checkpoints,
    enable_checkpoints as enable_checkpoints,
)
from ._config import (
    ROUND_DELAY_BY_DEFAULT as ROUND_DELAY_BY_DEFAULT,
    THREADING_CHECKPOINTS_ENABLED_BY_DEFAULT as THREADING_CHECKPOINTS_ENABLED_BY_DEFAULT,  # noqa: E501
)
from ._threads import (
    create_thread_lock as create_thread_lock,
    current_thread_ident as current_thread_ident,
)
from ._time import (
    Delay as Delay,
    clock as clock,
    create_delay as create_delay,
    sleep as sleep,
)
from ._waiters import (
    ThreadWaiter as ThreadWaiter,
    check_timeout as check_timeout,
)
