"""Concurrency tests for ``ModuleRedirector.resolve``.

Many threads race to resolve the toolchain modules in random order. Every
module must be loaded exactly once, every thread must observe the same
module object, and the finder must be removed exactly once.
"""

from __future__ import annotations

import random
import threading
import time
from collections import Counter
from pathlib import Path
from types import ModuleType

import pytest

from msbuild_locator.redirector import ModuleRedirector
from msbuild_locator.toolchain import ToolchainLayout

THREADS = 8
ROUNDS = 25


class CountingMetaPath(list):
    """``meta_path`` stand-in counting removals."""

    def __init__(self) -> None:
        super().__init__()
        self.removals = 0

    def remove(self, value) -> None:
        self.removals += 1
        super().remove(value)


class CountingLoader:
    """Loader that sleeps briefly to widen race windows."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self._lock = threading.Lock()

    def __call__(self, name: str, path: Path) -> ModuleType:
        with self._lock:
            self.calls[name] += 1
        time.sleep(0.001)
        return ModuleType(name)


def _race(redirector: ModuleRedirector, names: tuple[str, ...], seed: int) -> list[dict[str, ModuleType]]:
    barrier = threading.Barrier(THREADS)
    results: list[dict[str, ModuleType]] = [{} for _ in range(THREADS)]
    errors: list[BaseException] = []

    def worker(index: int) -> None:
        order = list(names)
        random.Random(seed * THREADS + index).shuffle(order)
        try:
            barrier.wait()
            for name in order:
                results[index][name] = redirector.resolve(name)
        except BaseException as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    return results


@pytest.mark.parametrize("seed", range(ROUNDS))
def test_concurrent_resolution_loads_each_module_once(
    seed: int, unique_layout: ToolchainLayout, toolchain_factory,
) -> None:
    loader = CountingLoader()
    meta_path = CountingMetaPath()
    redirector = ModuleRedirector(unique_layout, loader=loader, meta_path=meta_path, modules={})
    redirector.register(toolchain_factory(unique_layout))

    results = _race(redirector, unique_layout.modules, seed)

    assert loader.calls == Counter({name: 1 for name in unique_layout.modules})
    assert meta_path.removals == 1
    assert list(meta_path) == []
    assert redirector.is_active is False
    assert redirector.state.resolved_count == len(unique_layout.modules)
    for name in unique_layout.modules:
        served = {id(result[name]) for result in results}
        assert len(served) == 1
        assert results[0][name] is not None


def test_concurrent_register_allows_one_winner(unique_layout: ToolchainLayout, tmp_path: Path) -> None:
    redirector = ModuleRedirector(unique_layout, meta_path=[], modules={})
    barrier = threading.Barrier(THREADS)
    outcomes: list[str] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        try:
            redirector.register(tmp_path)
            outcome = "registered"
        except Exception as exc:
            outcome = type(exc).__name__
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=worker) for _ in range(THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert Counter(outcomes) == Counter({"registered": 1, "AlreadyActiveError": THREADS - 1})
    assert len(redirector.meta_path) == 1
