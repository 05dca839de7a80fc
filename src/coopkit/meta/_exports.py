#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from types import FunctionType, ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):
        from collections.abc import Iterator, MutableMapping
    else:
        from typing import Iterator, MutableMapping


def _owned(obj: object, package_name: str, /) -> bool:
    module_name = getattr(obj, "__module__", None)

    if module_name is None:
        return False

    return module_name == package_name or module_name.startswith(
        f"{package_name}.",
    )


def _functions_of(cls: type, /) -> Iterator[FunctionType]:
    for member in vars(cls).values():
        if isinstance(member, (staticmethod, classmethod)):
            yield member.__func__
        elif isinstance(member, property):
            yield from (
                func
                for func in (member.fget, member.fset, member.fdel)
                if func is not None
            )
        elif isinstance(member, FunctionType):
            yield member


def _rehome(package_name: str, name: str, value: object, /) -> None:
    # Enum members, locks and other instances may have a read-only
    # `__module__`, so only classes and plain functions are touched.

    if isinstance(value, type):
        if not _owned(value, package_name):
            return

        for func in _functions_of(value):
            if _owned(func, package_name):
                func.__module__ = package_name

        value.__module__ = package_name
    elif isinstance(value, FunctionType):
        if not _owned(value, package_name):
            return

        value.__module__ = package_name
        value.__name__ = name


def export(
    package_namespace: ModuleType | MutableMapping[str, object],
    /,
) -> None:
    """
    Make the public members of a package look as if they were defined in it.

    Classes and functions imported from private submodules (``_mutex``,
    ``_queue``, ...) get their ``__module__`` set to the package name, so
    reprs and pickles never mention where the code actually lives. Public
    subpackages (``lowlevel``, ``meta``) are handled recursively, and every
    handled namespace receives an ``__all__`` with constants first, unless it
    already has one.

    Call it as ``export(globals())`` at the end of ``__init__.py``.
    """

    if TYPE_CHECKING:
        return

    if isinstance(package_namespace, ModuleType):
        package_namespace = vars(package_namespace)

    package_name = package_namespace["__name__"]

    constants = []
    others = []

    # iterate over a copy, since subpackages may be imported meanwhile
    for name, value in list(package_namespace.items()):
        if name.startswith("_"):
            continue

        if isinstance(value, ModuleType):
            if value.__name__ == f"{package_name}.{name}":
                export(value)

            continue

        _rehome(package_name, name, value)

        if name.isupper():
            constants.append(name)
        else:
            others.append(name)

    package_namespace.setdefault(
        "__all__",
        (*sorted(constants), *sorted(others)),
    )
