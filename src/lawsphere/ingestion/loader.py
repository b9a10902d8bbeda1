"""Document loaders — thin wrappers around LangChain document loaders."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader, TextLoader

from lawsphere.errors import LoadError
from lawsphere.ingestion.models import Document

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_text(raw: str) -> str:
    """Strip control/NUL bytes and collapse whitespace runs to single spaces."""
    text = _CONTROL_CHARS.sub("", raw)
    return _WHITESPACE.sub(" ", text).strip()


def load_document(path: str | Path, file_name: str | None = None) -> Document:
    """Read a single file into a :class:`Document`.

    *file_name* overrides the document identity, which otherwise is the
    bare file name.

    PDFs are read page by page through ``PyPDFLoader``; anything else is
    treated as text.  The text is returned raw; sanitising is the
    ingestion step's job.

    Raises
    ------
    LoadError
        If the file cannot be read.
    """
    path = Path(path)
    name = file_name or path.name
    try:
        if path.suffix.lower() == ".pdf":
            pages = PyPDFLoader(str(path)).load()
        else:
            pages = TextLoader(str(path), encoding="utf-8", autodetect_encoding=True).load()
    except Exception as exc:
        raise LoadError(f"Could not read {name}", file_name=name) from exc

    return Document(file_name=name, raw_text="\n".join(p.page_content for p in pages))


def load_directory(path: str | Path, glob: str = "**/*.*") -> Iterator[Document]:
    """Yield every readable document under *path*, in sorted path order.

    Each document is named by its POSIX path relative to *path*, so files
    sharing a name in different subdirectories stay distinct.  Unreadable
    files are logged and skipped.

    Raises
    ------
    LoadError
        If *path* is not a directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise LoadError(f"Data directory not found: {root}", details={"path": str(root)})

    for file_path in sorted(root.glob(glob)):
        if not file_path.is_file():
            continue
        try:
            yield load_document(file_path, file_path.relative_to(root).as_posix())
        except LoadError as exc:
            logger.warning("Skipping %s: %s", file_path, exc)
