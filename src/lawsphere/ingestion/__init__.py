"""
Ingestion — document loading, chunking, embedding and batched upsert.

Raw legal texts are sanitised, split into overlapping labelled chunks,
embedded, and written to the vector store under deterministic ids so a
re-run overwrites instead of duplicating.
"""
