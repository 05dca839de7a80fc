#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import enum
import sys

from typing import TYPE_CHECKING

if sys.version_info >= (3, 11):
    from enum import EnumType
else:
    from enum import EnumMeta as EnumType

if sys.version_info >= (3, 11):
    from typing import final
else:
    from typing_extensions import final

if TYPE_CHECKING:
    from typing import Final, Literal


class _SingletonMeta(EnumType):
    def __call__(cls, /, *args, **kwargs):
        # `MarkerType()` returns the only member instead of failing
        if args or kwargs or len(cls) != 1:
            return super().__call__(*args, **kwargs)

        (member,) = cls

        return member


class SingletonEnum(enum.Enum, metaclass=_SingletonMeta):
    """
    A base class for marker types with exactly one member.

    Members are pickled by reference, so a marker survives a round trip
    through :mod:`pickle` as the very same object, and they are falsy so
    that ``value or fallback`` treats them as "nothing was given".

    Example:
      >>> class StopType(SingletonEnum):
      ...     STOP = 'STOP'
      >>> StopType() is StopType.STOP
      True
    """

    def __repr__(self, /) -> str:
        return f"{self.__class__.__module__}.{self._name_}"

    __str__ = __repr__

    def __bool__(self, /) -> bool:
        return False

    def __reduce_ex__(self, protocol, /) -> str:
        return self._name_


@final
class DefaultType(SingletonEnum):
    """The type of :data:`DEFAULT`; means "use the configured value"."""

    DEFAULT = "DEFAULT"


@final
class MissingType(SingletonEnum):
    """The type of :data:`MISSING`; means "no value was passed"."""

    MISSING = "MISSING"


DEFAULT: Final[Literal[DefaultType.DEFAULT]] = DefaultType.DEFAULT
MISSING: Final[Literal[MissingType.MISSING]] = MissingType.MISSING
