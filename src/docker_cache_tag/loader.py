"""Loading of build settings from the plugin environment and YAML files.

Settings are plain dictionaries keyed by BuildSpec field names. Several
layers can be merged before the BuildSpec is validated, so a YAML file can
provide defaults that command-line flags override.
"""

import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from schemas import BuildSpec

PLUGIN_PREFIX = "BUILDKITE_PLUGIN_DOCKER_ECR_CACHE_"

# Plugin property name -> BuildSpec field
SCALAR_PROPERTIES = {
    "DOCKERFILE": "dockerfile",
    "TARGET": "target",
    "ADDITIONAL_BUILD_ARGS": "additional_build_args",
}
LIST_PROPERTIES = {
    "BUILD_ARGS": "build_args",
    "CACHE_ON": "cache_on",
    "SECRETS": "secrets",
}


def read_property(env: Mapping[str, str], name: str) -> str | None:
    """Read a scalar plugin property.

    Returns:
        Property value, or None when unset or empty
    """
    return env.get(PLUGIN_PREFIX + name) or None


def read_list_property(env: Mapping[str, str], name: str) -> list[str]:
    """Read a plugin property that may be a string or an array.

    The CI agent exposes a string value at ``<PREFIX><NAME>`` and array
    items at ``<PREFIX><NAME>_<INDEX>``. A string value comes first,
    followed by array items in index order.

    Args:
        env: Environment mapping
        name: Property name (e.g. "BUILD_ARGS")

    Returns:
        List of values, possibly empty
    """
    base_name = PLUGIN_PREFIX + name
    result: list[str] = []

    scalar = env.get(base_name)
    if scalar:
        result.append(scalar)

    item_pattern = re.compile(re.escape(base_name) + r"_(\d+)")
    items: list[tuple[int, str]] = []
    for key, value in env.items():
        match = item_pattern.fullmatch(key)
        if match:
            items.append((int(match.group(1)), value))
    result.extend(value for _, value in sorted(items))

    return result


def load_settings_from_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect build settings from plugin environment variables.

    Only properties that are actually set appear in the result.
    """
    settings: dict[str, Any] = {}

    for prop, field_name in SCALAR_PROPERTIES.items():
        value = read_property(env, prop)
        if value is not None:
            settings[field_name] = value

    for prop, field_name in LIST_PROPERTIES.items():
        values = read_list_property(env, prop)
        if values:
            settings[field_name] = values

    return settings


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse YAML file.

    Args:
        path: Path to YAML file

    Returns:
        Parsed YAML data as dictionary

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        ValueError: If parsed data is not a dictionary
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML object in {path}, got {type(data)}")

    return data


def load_settings_from_file(path: Path) -> dict[str, Any]:
    """Load build settings from a YAML file.

    Keys use BuildSpec field names; dashes are accepted in place of
    underscores (``cache-on``).
    """
    data = load_yaml(path)
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def merge_settings(*layers: Mapping[str, Any]) -> dict[str, Any]:
    """Merge settings layers; later layers win, None values are ignored."""
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update({k: v for k, v in layer.items() if v is not None})
    return merged


def build_spec(*layers: Mapping[str, Any]) -> BuildSpec:
    """Merge settings layers and validate them into a BuildSpec.

    Raises:
        pydantic.ValidationError: If the merged settings are invalid
    """
    return BuildSpec(**merge_settings(*layers))
