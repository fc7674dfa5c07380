"""Cache tag computation.

The tag is built from a sequence of digest records, one per hashed input,
in a fixed order:

1. Dockerfile content
2. Target stage (hashed even when empty)
3. Architecture
4. Each build argument, resolved to KEY=VALUE
5. Additional build arguments, when set
6. Each file matched by each cache-on pattern, or the JSON value extracted
   from it when the pattern carries a key-expression

Records are concatenated without separators and hashed once more; the first
seven hex characters of that digest are the tag. The record format matches
checksum tool output (``<hex>  <name>``) so tags stay stable for caches that
were populated before this package existed.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from docker_cache_tag.arguments import resolve_build_arg
from docker_cache_tag.errors import ConfigError, DependencyReadError
from docker_cache_tag.globbing import expand_glob
from docker_cache_tag.jsonquery import extract_json_value
from docker_cache_tag.utils import (
    compute_file_digest,
    compute_text_digest,
    digest_record,
)
from schemas import BuildSpec

TAG_LENGTH = 7

logger = logging.getLogger(__name__)


@dataclass
class Fingerprint:
    """Result of a tag computation.

    Attributes:
        tag: Short hex tag
        records: Digest records in the order they were hashed
    """

    tag: str
    records: list[str] = field(default_factory=list)


class _RecordBuffer:
    """Ordered collection of digest records for one computation."""

    def __init__(self) -> None:
        self.records: list[str] = []

    def add_text(self, text: str, newline: bool = True) -> None:
        self.records.append(digest_record(compute_text_digest(text, newline)))

    def add_file(self, path: Path, label: str) -> None:
        try:
            digest = compute_file_digest(path)
        except OSError as e:
            raise DependencyReadError(f"Cannot read {label}: {e}") from e
        self.records.append(digest_record(digest, label))

    def finish(self) -> Fingerprint:
        tag = compute_text_digest("".join(self.records))[:TAG_LENGTH]
        return Fingerprint(tag=tag, records=list(self.records))


def compute_fingerprint(
    spec: BuildSpec,
    env: Mapping[str, str],
    cwd: Path | str = ".",
) -> Fingerprint:
    """Compute the cache tag for a build, keeping the intermediate records.

    Args:
        spec: Build inputs
        env: Read-only environment used to resolve bare build arguments
        cwd: Directory that the Dockerfile path and cache-on patterns are
            relative to

    Returns:
        Fingerprint with tag and digest records

    Raises:
        ConfigError: If the Dockerfile does not exist
        DependencyReadError: If a matched dependency cannot be read or a
            JSON dependency cannot be evaluated
    """
    cwd = Path(cwd)
    dockerfile = cwd / spec.dockerfile
    if not dockerfile.is_file():
        raise ConfigError(f"Dockerfile not found: {dockerfile}")

    buffer = _RecordBuffer()
    logger.info("--- Computing tag")

    logger.info("DOCKERFILE")
    logger.info(f"+ {spec.dockerfile}:{spec.target or '<target>'}")
    buffer.add_file(dockerfile, dockerfile.name)
    buffer.add_text(spec.target)

    logger.info("ARCHITECTURE")
    logger.info(f"+ {spec.architecture}")
    buffer.add_text(spec.architecture)

    logger.info("BUILD_ARGS")
    for arg in spec.build_args:
        # Logged as configured, before resolution
        logger.info(f"+ {arg}")
        buffer.add_text(resolve_build_arg(arg, env))

    if spec.additional_build_args:
        logger.info("ADDITIONAL_BUILD_ARGS")
        buffer.add_text(spec.additional_build_args)

    logger.info("CACHE_ON")
    for pattern in spec.dependency_patterns:
        logger.info(str(pattern))
        files = expand_glob(pattern.glob, cwd)
        if not files:
            logger.debug(f"No files match {pattern.glob}")
        for file in files:
            logger.info(f"+ {file}")
            if pattern.key_expression is None:
                buffer.add_file(cwd / file, file)
            else:
                value = extract_json_value(cwd / file, pattern.key_expression)
                buffer.add_text(value, newline=False)

    fingerprint = buffer.finish()
    logger.info(
        f"Computed tag {fingerprint.tag} from {len(fingerprint.records)} digests"
    )
    return fingerprint


def compute_tag(
    spec: BuildSpec,
    env: Mapping[str, str],
    cwd: Path | str = ".",
) -> str:
    """Compute the cache tag for a build.

    See compute_fingerprint() for arguments and errors.
    """
    return compute_fingerprint(spec, env, cwd).tag
