"""Shared fixtures for cache tag tests."""

from pathlib import Path

import pytest

from schemas import BuildSpec

SCRATCH_DOCKERFILE = "FROM scratch\n"


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory containing a minimal Dockerfile."""
    (tmp_path / "Dockerfile").write_text(SCRATCH_DOCKERFILE)
    return tmp_path


@pytest.fixture
def base_spec() -> BuildSpec:
    """Spec with no target, build args or cache-on patterns."""
    return BuildSpec(architecture="x86_64")


@pytest.fixture
def make_files(tmp_path: Path):
    """Factory creating files (and parent directories) below tmp_path."""

    def _make(files: dict[str, str]) -> Path:
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return tmp_path

    return _make
