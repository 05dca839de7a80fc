#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys
import time

from functools import partial
from math import isinf, isnan
from typing import TYPE_CHECKING, Final, Union

from coopkit._exceptions import InvalidConfiguration

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    if sys.version_info >= (3, 10):
        from typing import TypeAlias
    else:
        from typing_extensions import TypeAlias

Delay: TypeAlias = Union[float, Callable[[], object], None]

clock: Final[Callable[[], float]] = time.monotonic


def sleep(seconds: float, /) -> None:
    if isnan(seconds):
        msg = "seconds must be non-NaN"
        raise ValueError(msg)

    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    time.sleep(seconds)


def create_delay(delay: Delay, /) -> Callable[[], object] | None:
    """
    Turn *delay* into a zero-argument strategy, or :data:`None` for no delay.

    *delay* is either :data:`None`, a non-negative finite number of seconds,
    or a callable that is returned as is (for example, a fake clock's
    ``advance`` method in tests).

    Example:
      >>> create_delay(None) is None
      True
      >>> create_delay(0) is None
      True
      >>> create_delay(print) is print
      True
    """

    if delay is None:
        return None

    if callable(delay):
        return delay

    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        msg = f"delay must be a number or a callable, got {delay!r}"
        raise InvalidConfiguration(msg)

    if isnan(delay) or delay < 0:
        msg = f"delay must be non-negative, got {delay!r}"
        raise InvalidConfiguration(msg)

    if isinf(delay):
        msg = f"delay must be finite, got {delay!r}"
        raise InvalidConfiguration(msg)

    if not delay:
        return None

    return partial(sleep, float(delay))
