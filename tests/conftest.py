"""Shared pytest configuration and fixtures."""

import hashlib
import os
from pathlib import Path
from typing import Callable

import numpy as np
import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that download and run a real model"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("CONTEXT_PROVIDER_INTEGRATION"):
        return
    skip = pytest.mark.skip(reason="set CONTEXT_PROVIDER_INTEGRATION=1 to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


class FakeEmbedder:
    """Deterministic embedder: hashes text into a unit vector.

    ``fail_on`` makes ``embed`` raise for any text containing that marker.
    """

    DIM = 8

    def __init__(self, fail_on: str | None = None, fail_load: bool = False):
        self.fail_on = fail_on
        self.fail_load = fail_load
        self.load_calls = 0
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self.DIM

    @property
    def model_name(self) -> str:
        return "fake-model"

    def load(self) -> None:
        self.load_calls += 1
        if self.fail_load:
            raise RuntimeError("weights not found")

    def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise RuntimeError("simulated model failure")
        digest = hashlib.sha256(text.encode("utf-8")).digest()[: self.DIM]
        vector = np.frombuffer(digest, dtype=np.uint8).astype(np.float32) + 1.0
        return vector / np.linalg.norm(vector)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Create a workspace from a {relative path: content} mapping."""

    def _make(files: dict[str, str | bytes]) -> Path:
        root = tmp_path / "workspace"
        root.mkdir(exist_ok=True)
        for rel_path, content in files.items():
            path = root / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make
