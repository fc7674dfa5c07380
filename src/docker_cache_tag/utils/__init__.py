"""Utility functions for cache tag computation."""

from .hashing import (
    STDIN_LABEL,
    compute_digest,
    compute_file_digest,
    compute_text_digest,
    digest_record,
)

__all__ = [
    "STDIN_LABEL",
    "compute_digest",
    "compute_file_digest",
    "compute_text_digest",
    "digest_record",
]
