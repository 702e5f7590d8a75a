"""Extraction services: column matching, header relocation, row transformation,
pattern fallback, and the pipeline/orchestration layers built on them."""
