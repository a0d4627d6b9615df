import threading
import time

import pytest

from agent_core.errors import InferenceFault
from models.runtime import InferenceGate, LazyResource, resolve_device


def test_lazy_resource_builds_once_under_concurrent_first_use():
    builds = []
    barrier = threading.Barrier(8)

    def factory():
        builds.append(1)
        time.sleep(0.05)
        return object()

    resource = LazyResource(factory, name="model")
    results = []

    def worker():
        barrier.wait()
        results.append(resource.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(builds) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)
    assert resource.loaded


def test_lazy_resource_failure_is_not_cached():
    attempts = []

    def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise OSError("download failed")
        return "model"

    resource = LazyResource(factory)
    with pytest.raises(OSError):
        resource.get()
    assert not resource.loaded
    assert resource.get() == "model"
    assert len(attempts) == 2


def test_gate_returns_result():
    gate = InferenceGate(timeout=1.0)
    try:
        assert gate.run("embed", lambda x: x * 2, 21) == 42
    finally:
        gate.shutdown()


def test_gate_wraps_backend_errors():
    gate = InferenceGate(timeout=1.0)

    def boom():
        raise RuntimeError("cuda out of memory")

    try:
        with pytest.raises(InferenceFault) as info:
            gate.run("classify", boom)
        assert info.value.operation == "classify"
        assert "cuda out of memory" in str(info.value)
        assert isinstance(info.value.__cause__, RuntimeError)
    finally:
        gate.shutdown()


def test_gate_times_out():
    gate = InferenceGate(timeout=0.05)
    release = threading.Event()
    try:
        with pytest.raises(InferenceFault, match="timed out"):
            gate.run("embed", release.wait, 2.0)
    finally:
        release.set()
        gate.shutdown()


def test_serialized_gate_runs_one_call_at_a_time():
    gate = InferenceGate(timeout=2.0, serialize=True)
    active, peak = [0], [0]
    lock = threading.Lock()

    def call():
        with lock:
            active[0] += 1
            peak[0] = max(peak[0], active[0])
        time.sleep(0.02)
        with lock:
            active[0] -= 1

    threads = [threading.Thread(target=gate.run, args=("embed", call)) for _ in range(4)]
    try:
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert peak[0] == 1
    finally:
        gate.shutdown()


def test_resolve_device_passthrough():
    assert resolve_device("cpu") == "cpu"
    assert resolve_device("cuda") == "cuda"
