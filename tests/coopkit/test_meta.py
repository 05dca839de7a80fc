#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pickle

from types import ModuleType

import pytest

import coopkit

from coopkit.meta import DEFAULT, MISSING, DefaultType, MissingType, export


@pytest.mark.parametrize(
    ("marker", "marker_type", "marker_repr"),
    [
        (DEFAULT, DefaultType, "coopkit.meta.DEFAULT"),
        (MISSING, MissingType, "coopkit.meta.MISSING"),
    ],
)
def test_markers(marker, marker_type, marker_repr):
    assert marker_type() is marker
    assert not marker
    assert repr(marker) == marker_repr
    assert str(marker) == marker_repr
    assert pickle.loads(pickle.dumps(marker)) is marker

    with pytest.raises(TypeError):

        class MyMarkerType(marker_type):
            pass


def test_public_objects_look_local():
    for name in coopkit.__all__:
        value = getattr(coopkit, name)

        if isinstance(value, type) or callable(value):
            assert value.__module__ == "coopkit", name

    assert coopkit.lowlevel.ThreadWaiter.__module__ == "coopkit.lowlevel"
    assert coopkit.Mutex.acquire.__module__ == "coopkit"


def test_all_is_sorted_with_constants_first():
    names = list(coopkit.lowlevel.__all__)
    constants = [name for name in names if name.isupper()]

    assert names[: len(constants)] == sorted(constants)
    assert names[len(constants) :] == sorted(names[len(constants) :])
    assert "ROUND_DELAY_BY_DEFAULT" in constants


def test_export_skips_foreign_objects():
    package = ModuleType("package")
    package.__dict__.update(
        ModuleType=ModuleType,
        _private=lambda: None,
    )

    export(package)

    assert ModuleType.__module__ == "builtins"
    assert package.__all__ == ("ModuleType",)
