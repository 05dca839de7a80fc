#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import time

from ._config import THREADING_CHECKPOINTS_ENABLED_BY_DEFAULT

_checkpoints_enabled: bool = THREADING_CHECKPOINTS_ENABLED_BY_DEFAULT


def enable_checkpoints() -> None:
    global _checkpoints_enabled

    _checkpoints_enabled = True


def disable_checkpoints() -> None:
    global _checkpoints_enabled

    _checkpoints_enabled = False


def checkpoints_enabled() -> bool:
    return _checkpoints_enabled


def checkpoint(*, force: bool = False) -> None:
    """
    Give other threads a chance to run.

    Does nothing unless checkpoints are enabled or *force* is passed. The
    primitives call it after every blocking acquisition that succeeded
    without waiting, so enabling checkpoints widens the set of interleavings
    that tests get to see.

    You can control whether checkpoints are enabled or not in the following
    ways (in order of priority):

    * Set ``COOPKIT_THREADING_CHECKPOINTS`` environment variable to any
      non-empty value before the import.
    * Use :func:`enable_checkpoints`/:func:`disable_checkpoints` at runtime.
    * Pass ``force=True`` to force a checkpoint.
    """

    if force or _checkpoints_enabled:
        time.sleep(0)
