"""LawSphere — retrieval-augmented question answering over legal texts."""

__version__ = "0.1.0"
