#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from _thread import allocate_lock, get_ident
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from _thread import LockType as ThreadLock


def current_thread_ident() -> int:
    """
    Return the identifier of the current thread.

    The value is only unique among threads that are alive at the same time,
    which is enough to tell lock holders apart.
    """

    return get_ident()


def create_thread_lock() -> ThreadLock:
    """
    Return a new raw (non-reentrant) thread lock.

    The :mod:`_thread` module is used directly so that higher-level wrappers
    from :mod:`threading` never get in the way of the primitives.
    """

    return allocate_lock()
