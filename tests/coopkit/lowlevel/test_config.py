#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import pytest

import coopkit

from coopkit.lowlevel import (
    checkpoint,
    checkpoints_enabled,
    disable_checkpoints,
    enable_checkpoints,
)
from coopkit.lowlevel._config import _getenv_seconds

NAME = "COOPKIT_TEST_SECONDS"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("", None),
        ("   ", None),
        ("0", 0.0),
        ("0.25", 0.25),
        (" 3 ", 3.0),
    ],
)
def test_seconds(monkeypatch, value, expected):
    monkeypatch.setenv(NAME, value)

    assert _getenv_seconds(NAME) == expected


def test_seconds_unset(monkeypatch):
    monkeypatch.delenv(NAME, raising=False)

    assert _getenv_seconds(NAME) is None


@pytest.mark.parametrize("value", ["soon", "-1", "nan", "inf"])
def test_invalid_seconds(monkeypatch, value):
    monkeypatch.setenv(NAME, value)

    with pytest.raises(coopkit.InvalidConfiguration, match=NAME):
        _getenv_seconds(NAME)


def test_checkpoints_switch(monkeypatch):
    calls = []
    monkeypatch.setattr("time.sleep", calls.append)

    was_enabled = checkpoints_enabled()

    try:
        disable_checkpoints()
        checkpoint()

        assert not checkpoints_enabled()
        assert calls == []

        checkpoint(force=True)

        assert calls == [0]

        enable_checkpoints()
        checkpoint()

        assert checkpoints_enabled()
        assert calls == [0, 0]
    finally:
        if was_enabled:
            enable_checkpoints()
        else:
            disable_checkpoints()
