"""Extraction of values from JSON dependency files with jq expressions."""

import json
from pathlib import Path
from typing import Any

import jq

from docker_cache_tag.errors import DependencyReadError


def extract_json_value(file_path: Path, expression: str) -> str:
    """Evaluate a jq expression against a JSON file.

    Args:
        file_path: Path to JSON file
        expression: jq program (e.g. ".dependencies")

    Returns:
        Textual form of the results, one per line, as ``jq -r`` prints them

    Raises:
        DependencyReadError: If the file cannot be read, is not valid JSON,
            or the expression fails to compile or evaluate
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise DependencyReadError(f"Cannot read {file_path}: {e}") from e
    except ValueError as e:
        raise DependencyReadError(f"Malformed JSON in {file_path}: {e}") from e

    try:
        results = jq.compile(expression).input_value(document).all()
    except ValueError as e:
        raise DependencyReadError(
            f"Cannot evaluate {expression!r} against {file_path}: {e}"
        ) from e

    return "\n".join(format_raw_output(result) for result in results)


def format_raw_output(value: Any) -> str:
    """Render a jq result the way ``jq -r`` does.

    Strings are emitted verbatim, everything else as indented JSON.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)
