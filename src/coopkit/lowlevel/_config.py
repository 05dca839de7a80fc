#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os

from math import isinf, isnan
from typing import Final

from coopkit._exceptions import InvalidConfiguration


def _getenv_seconds(name: str, /) -> float | None:
    value = os.getenv(name, "").strip()

    if not value:
        return None

    try:
        seconds = float(value)
    except ValueError:
        msg = f"{name} must be a number of seconds, got {value!r}"
        raise InvalidConfiguration(msg) from None

    if isnan(seconds) or seconds < 0:
        msg = f"{name} must be non-negative, got {value!r}"
        raise InvalidConfiguration(msg)

    if isinf(seconds):
        msg = f"{name} must be finite, got {value!r}"
        raise InvalidConfiguration(msg)

    return seconds


ROUND_DELAY_BY_DEFAULT: Final[float | None] = _getenv_seconds(
    "COOPKIT_ROUND_DELAY",
)
THREADING_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[bool] = bool(
    os.getenv("COOPKIT_THREADING_CHECKPOINTS", ""),
)
