"""Unit tests for the KFP ingestion component and the CLI entry point.

The component is exercised through ``component.python_func`` so no
Kubeflow cluster is needed.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from conftest import FakeEmbedder, InMemoryVectorStore

from lawsphere import cli

TEXT = "Section 2. In this Sanhita, unless the context otherwise requires, the following words have meanings. " * 30


class _FakeArtifact:
    """Minimal stand-in for ``dsl.Metrics``."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.metadata: dict = {}
        self._metrics: dict = {}

    def log_metric(self, name: str, value) -> None:  # noqa: ANN001
        self._metrics[name] = value


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    root.mkdir()
    (root / "bns.txt").write_text(TEXT, encoding="utf-8")
    (root / "blank.txt").write_text("   ", encoding="utf-8")
    return root


class TestIngestCorpus:
    def test_reports_metrics(self, tmp_path: Path, data_dir: Path) -> None:
        from pipelines.components.ingest import ingest_corpus

        store = InMemoryVectorStore()
        metrics = _FakeArtifact(str(tmp_path / "metrics"))
        with (
            patch("lawsphere.retrieval.pinecone_store.PineconeVectorStore", return_value=store) as store_cls,
            patch("lawsphere.ingestion.embedder.EmbeddingService", return_value=FakeEmbedder()),
        ):
            result = ingest_corpus.python_func(
                data_dir=str(data_dir),
                metrics=metrics,
                pinecone_index="bns-index",
                upsert_transport="rest",
            )

        assert store_cls.call_args.args == ("bns-index",)
        assert store_cls.call_args.kwargs["transport"] == "rest"
        assert metrics._metrics["documents_ingested"] == 1
        assert metrics._metrics["documents_skipped"] == 1
        assert metrics._metrics["chunks_stored"] == len(store.records) > 0
        assert metrics._metrics["chunks_lost"] == 0
        assert result.startswith(f"Stored {len(store.records)} chunks")


class TestCli:
    def test_ingest_directory(self, data_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        store = InMemoryVectorStore()
        with (
            patch("lawsphere.retrieval.factory.build_vector_store", return_value=store),
            patch("lawsphere.ingestion.embedder.EmbeddingService", return_value=FakeEmbedder()),
        ):
            code = cli.main(["--data-dir", str(data_dir), "--glob", "*.txt", "--batch-size", "2"])

        assert code == 0
        out = capsys.readouterr().out
        assert f"bns.txt: {len(store.records)} chunks" in out
        assert all(len(ids) <= 2 for ids in store.upsert_calls)

    def test_unresolvable_index_exits_nonzero(self, data_dir: Path) -> None:
        with (
            patch("lawsphere.retrieval.factory.build_vector_store", return_value=InMemoryVectorStore(connect_error=True)),
            patch("lawsphere.ingestion.embedder.EmbeddingService", return_value=FakeEmbedder()),
        ):
            assert cli.main(["--data-dir", str(data_dir)]) == 1

    def test_missing_data_dir_exits_nonzero(self, tmp_path: Path) -> None:
        with (
            patch("lawsphere.retrieval.factory.build_vector_store", return_value=InMemoryVectorStore()),
            patch("lawsphere.ingestion.embedder.EmbeddingService", return_value=FakeEmbedder()),
        ):
            assert cli.main(["--data-dir", str(tmp_path / "missing")]) == 1
