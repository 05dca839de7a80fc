#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2026 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import inspect
import sys
import threading

from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager

import pytest

from wrapt import decorator

if sys.version_info >= (3, 11):
    WaitTimeout = TimeoutError
else:
    from concurrent.futures import TimeoutError as WaitTimeout

# how long each thread-safety test hammers the primitives, in seconds
THREAD_SAFETY_DURATION = 2


@contextmanager
def _test_thread_safety_cm(*functions):
    with ThreadPoolExecutor(len(functions)) as executor:
        barrier = threading.Barrier(len(functions))
        stopped = threading.Event()

        @decorator
        def _wrapper(wrapped, instance, args, kwargs):
            barrier.wait()

            if "stopped" in inspect.signature(wrapped).parameters:
                kwargs = {**kwargs, "stopped": stopped}

            while True:
                result = wrapped(*args, **kwargs)

                if stopped.is_set():
                    break

            return result

        interval = sys.getswitchinterval()
        sys.setswitchinterval(min(1e-6, interval))

        try:
            futures = [executor.submit(_wrapper(f)) for f in functions]

            try:
                for future in as_completed(
                    futures,
                    timeout=THREAD_SAFETY_DURATION,
                ):
                    future.result()  # reraise
            except WaitTimeout:
                pass
            finally:
                stopped.set()

            yield [future.result() for future in futures]
        finally:
            sys.setswitchinterval(interval)


@pytest.fixture
def test_thread_safety():
    def _impl(*functions):
        with _test_thread_safety_cm(*functions) as results:
            return results

    return _impl


def pytest_addoption(parser):
    parser.addoption(
        "--thread-safety",
        action="store_true",
        default=False,
        help="run thread-safety tests",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "threadsafe: mark test as thread-safety test",
    )


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "test_thread_safety" in item.fixturenames:
            item.add_marker(pytest.mark.threadsafe)

        if "threadsafe" in item.keywords:
            if not config.getoption("--thread-safety"):
                item.add_marker(
                    pytest.mark.skip(
                        reason="need --thread-safety option to run",
                    )
                )
