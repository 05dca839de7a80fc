#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package holds the small pieces of metaprogramming that the library uses
for its own needs: singleton markers for omitted arguments and the export
helper that makes private submodules invisible to the outside world.
"""

from ._exports import (
    export as export,
)
from ._markers import (
    DEFAULT as DEFAULT,
    MISSING as MISSING,
    DefaultType as DefaultType,
    MissingType as MissingType,
    SingletonEnum as SingletonEnum,
)
