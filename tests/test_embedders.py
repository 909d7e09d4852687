"""Unit tests for embedding providers."""

from pathlib import Path

import numpy as np
import pytest

from context_provider.config import ModelConfig
from context_provider.embedders import CallableEmbedder, SentenceTransformerEmbedder, create_embedder
from context_provider.embedders import sentence_transformer
from context_provider.errors import ModelLoadError
from context_provider.protocols import EmbeddingProvider


class _FakeModel:
    def __init__(self, name: str, cache_folder: str | None = None) -> None:
        self.name = name
        self.cache_folder = cache_folder
        self.encode_kwargs: dict = {}

    def encode(self, text: str, **kwargs) -> np.ndarray:
        self.encode_kwargs = kwargs
        return np.array([0.0, 1.0, 0.0], dtype=np.float64)

    def get_sentence_embedding_dimension(self) -> int:
        return 3


class TestCallableEmbedder:
    """Tests for ``CallableEmbedder``."""

    def test_normalizes_output(self) -> None:
        embedder = CallableEmbedder(lambda text: [3.0, 4.0])
        vector = embedder.embed("anything")

        assert vector.dtype == np.float32
        assert vector.tolist() == pytest.approx([0.6, 0.8])
        assert embedder.dimension == 2

    def test_rejects_empty_vector(self) -> None:
        with pytest.raises(ValueError):
            CallableEmbedder(lambda text: []).embed("x")

    def test_rejects_changing_dimension(self) -> None:
        sizes = iter([2, 3])
        embedder = CallableEmbedder(lambda text: [1.0] * next(sizes))
        embedder.embed("a")
        with pytest.raises(ValueError, match="dimension changed"):
            embedder.embed("b")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(CallableEmbedder(lambda text: [1.0]), EmbeddingProvider)


class TestSentenceTransformerEmbedder:
    """Tests for ``SentenceTransformerEmbedder`` with the model class patched."""

    def test_model_loads_lazily(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        created: list[_FakeModel] = []

        def factory(name: str, cache_folder: str | None = None) -> _FakeModel:
            created.append(_FakeModel(name, cache_folder))
            return created[-1]

        monkeypatch.setattr(sentence_transformer, "SentenceTransformer", factory)
        embedder = SentenceTransformerEmbedder("tiny-model", cache_dir=tmp_path / "cache")
        assert created == []

        vector = embedder.embed("hello")
        embedder.embed("again")

        assert len(created) == 1
        assert created[0].cache_folder == str(tmp_path / "cache")
        assert (tmp_path / "cache").is_dir()
        assert created[0].encode_kwargs["normalize_embeddings"] is True
        assert vector.dtype == np.float32
        assert embedder.dimension == 3
        assert isinstance(embedder, EmbeddingProvider)

    def test_load_failure_names_model(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def factory(name: str, cache_folder: str | None = None) -> _FakeModel:
            raise OSError("repository not found")

        monkeypatch.setattr(sentence_transformer, "SentenceTransformer", factory)
        embedder = SentenceTransformerEmbedder("missing/model")

        with pytest.raises(ModelLoadError, match="missing/model") as excinfo:
            embedder.load()
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_quantized_model_goes_through_dynamic_quantization(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import torch

        loaded = _FakeModel("tiny-model")
        quantized = _FakeModel("tiny-model-int8")
        calls: list[tuple] = []

        def fake_quantize(model, layers, dtype):
            calls.append((model, layers, dtype))
            return quantized

        monkeypatch.setattr(
            sentence_transformer, "SentenceTransformer", lambda name, cache_folder=None: loaded
        )
        monkeypatch.setattr(torch.quantization, "quantize_dynamic", fake_quantize)

        embedder = SentenceTransformerEmbedder("tiny-model", quantized=True)
        embedder.embed("hello")

        assert calls == [(loaded, {torch.nn.Linear}, torch.qint8)]
        assert embedder.model is quantized
        assert quantized.encode_kwargs["normalize_embeddings"] is True

    def test_quantization_failure_is_a_load_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import torch

        def broken_quantize(model, layers, dtype):
            raise RuntimeError("no quantized engine")

        monkeypatch.setattr(
            sentence_transformer,
            "SentenceTransformer",
            lambda name, cache_folder=None: _FakeModel(name),
        )
        monkeypatch.setattr(torch.quantization, "quantize_dynamic", broken_quantize)

        with pytest.raises(ModelLoadError, match="tiny-model"):
            SentenceTransformerEmbedder("tiny-model", quantized=True).load()

    def test_create_embedder_passes_quantized(self, tmp_path: Path) -> None:
        embedder = create_embedder(ModelConfig(model="m", cache_dir=tmp_path, quantized=True))
        assert embedder._quantized is True

    def test_create_embedder_from_config(self, tmp_path: Path) -> None:
        embedder = create_embedder(ModelConfig(model="m", cache_dir=tmp_path))
        assert embedder.model_name == "m"
        assert embedder.DEFAULT_MODEL == "all-MiniLM-L6-v2"


@pytest.mark.integration
def test_real_model_produces_unit_vectors(tmp_path: Path) -> None:
    embedder = SentenceTransformerEmbedder(cache_dir=tmp_path / "models")
    vector = embedder.embed("The scanner loads text files.")

    assert vector.shape == (embedder.dimension,)
    assert np.linalg.norm(vector) == pytest.approx(1.0, abs=1e-4)
