"""Content digest primitives.

All digests are SHA-1. Changing the algorithm invalidates every tag that was
ever published, so it is fixed here rather than configurable.
"""

import hashlib
from pathlib import Path

# Label used by checksum tools for data read from a pipe
STDIN_LABEL = "-"

_CHUNK_SIZE = 64 * 1024


def compute_digest(data: bytes) -> str:
    """Compute SHA-1 hash of raw bytes.

    Args:
        data: Bytes to hash

    Returns:
        Hexadecimal SHA-1 hash string
    """
    return hashlib.sha1(data).hexdigest()


def compute_text_digest(text: str, newline: bool = True) -> str:
    """Compute SHA-1 hash of a string encoded as UTF-8.

    Args:
        text: String to hash
        newline: Terminate the string with a newline before hashing, the
            way ``echo`` feeds it to a checksum tool

    Returns:
        Hexadecimal SHA-1 hash string
    """
    if newline:
        text += "\n"
    return compute_digest(text.encode("utf-8"))


def compute_file_digest(file_path: Path) -> str:
    """Compute SHA-1 hash of file content.

    Args:
        file_path: Path to file to hash

    Returns:
        Hexadecimal SHA-1 hash string

    Raises:
        OSError: If the file cannot be opened or read
    """
    sha1 = hashlib.sha1()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            sha1.update(chunk)
    return sha1.hexdigest()


def digest_record(digest: str, label: str = STDIN_LABEL) -> str:
    """Format a digest as a checksum line without the trailing newline.

    Examples:
        >>> digest_record("adc83b19e793491b1c6ea0fd8b46cd9f32e592fc")
        "adc83b19e793491b1c6ea0fd8b46cd9f32e592fc  -"
    """
    return f"{digest}  {label}"
