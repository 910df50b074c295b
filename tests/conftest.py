import os
from concurrent.futures import Executor, Future

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class ImmediateExecutor(Executor):
    """Runs submitted work inline so save outcomes are visible right away."""

    def submit(self, fn, *args, **kwargs):
        fut = Future()
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as e:
            fut.set_exception(e)
        return fut


class DeferredExecutor(Executor):
    """Holds submitted work until a test runs it, in any order."""

    def __init__(self):
        self.pending = []

    def submit(self, fn, *args, **kwargs):
        fut = Future()
        self.pending.append((fn, args, kwargs, fut))
        return fut

    def run(self, index):
        fn, args, kwargs, fut = self.pending[index]
        try:
            fut.set_result(fn(*args, **kwargs))
        except Exception as e:
            fut.set_exception(e)


@pytest.fixture
def immediate_executor():
    return ImmediateExecutor()


@pytest.fixture
def deferred_executor():
    return DeferredExecutor()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication([])
    yield app
