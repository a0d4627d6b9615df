"""
models/runtime.py
-----------------
Shared runtime plumbing for the inference backends:

    • LazyResource   build a model at most once per process; concurrent first
                     callers join the same in-flight construction
    • InferenceGate  run backend calls on a worker pool with a per-call timeout
                     (one worker = calls to the shared backends are serialized)
    • resolve_device map "auto" to cuda/cpu via torch
"""

import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, Generic, TypeVar

from agent_core.errors import InferenceFault

T = TypeVar("T")


class LazyResource(Generic[T]):
    """Initialize-once holder. A failed build is not cached; the next caller retries."""

    def __init__(self, factory: Callable[[], T], name: str = "resource"):
        self._factory = factory
        self.name = name
        self._value: T | None = None
        self._ready = False
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._ready

    def get(self) -> T:
        if self._ready:
            return self._value
        with self._lock:
            if not self._ready:
                self._value = self._factory()
                self._ready = True
        return self._value

    def reset(self):
        with self._lock:
            self._value = None
            self._ready = False


class InferenceGate:
    """
    Runs backend calls with a bounded wait. The timeout covers queueing plus
    execution; a timed-out call is not interrupted and keeps its worker slot
    until the backend returns.
    """

    def __init__(self, timeout: float, serialize: bool = True, max_workers: int = 4):
        self.timeout = float(timeout)
        self.serialize = serialize
        self._executor = ThreadPoolExecutor(
            max_workers=1 if serialize else max_workers,
            thread_name_prefix="inference",
        )

    def run(self, operation: str, fn: Callable[..., T], *args, **kwargs) -> T:
        future = self._executor.submit(fn, *args, **kwargs)
        try:
            return future.result(timeout=self.timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise InferenceFault(operation, f"timed out after {self.timeout:g}s") from exc
        except InferenceFault:
            raise
        except Exception as exc:
            raise InferenceFault(operation, f"{type(exc).__name__}: {exc}") from exc

    def shutdown(self, wait: bool = False):
        self._executor.shutdown(wait=wait)


def resolve_device(device: str = "auto") -> str:
    if device != "auto":
        return device
    import torch
    return "cuda" if torch.cuda.is_available() else "cpu"
