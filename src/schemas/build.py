"""Pydantic models describing the inputs of a cache tag computation."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

BUILD_ARG_PATTERN = re.compile(r"^[^=\s]+(=.*)?$", re.DOTALL)
SECRET_ID_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")

KEY_EXPRESSION_SEPARATOR = "#"


class DependencyPattern(BaseModel):
    """A cache-on entry: a glob, optionally paired with a JSON key-expression.

    ``package.json#.dependencies`` hashes only the value of
    ``.dependencies`` in every file the glob matches instead of the whole
    file.
    """

    model_config = ConfigDict(frozen=True)

    glob: str = Field(min_length=1, description="Glob naming dependency files")
    key_expression: str | None = Field(
        None, description="jq expression evaluated against each matched file"
    )

    @classmethod
    def parse(cls, text: str) -> "DependencyPattern":
        """Split ``<glob>#<key-expression>`` at the first separator."""
        glob, _, expression = text.partition(KEY_EXPRESSION_SEPARATOR)
        return cls(glob=glob, key_expression=expression or None)

    def __str__(self) -> str:
        if self.key_expression is None:
            return self.glob
        return f"{self.glob}{KEY_EXPRESSION_SEPARATOR}{self.key_expression}"


class BuildSpec(BaseModel):
    """Everything that decides whether two builds may share a cached image.

    Instances are immutable and built fresh for every computation. List
    fields keep their order, since order is significant for the tag.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dockerfile: str = Field(
        default="Dockerfile",
        min_length=1,
        description="Path to the Dockerfile",
    )
    target: str = Field(default="", description="Build stage to target")
    architecture: str = Field(
        min_length=1, description="Machine hardware name (e.g. x86_64)"
    )
    build_args: tuple[str, ...] = Field(
        default=(), description="Build arguments as KEY or KEY=VALUE"
    )
    additional_build_args: str = Field(
        default="", description="Opaque extra builder arguments"
    )
    cache_on: tuple[str, ...] = Field(
        default=(), description="Dependency patterns whose content affects the tag"
    )
    secrets: tuple[str, ...] = Field(
        default=(),
        description="Build secrets as id=...,src=... or an environment variable name",
    )

    @field_validator("target", "additional_build_args", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        """Treat an unset value the same as an empty string."""
        return "" if v is None else v

    @field_validator("build_args", "cache_on", "secrets", mode="before")
    @classmethod
    def scalar_as_list(cls, v):
        """Accept a single string where a list is expected."""
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("build_args")
    @classmethod
    def validate_build_args(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that every build argument is KEY or KEY=VALUE."""
        for arg in v:
            if not BUILD_ARG_PATTERN.match(arg):
                raise ValueError(
                    f"Invalid build argument {arg!r}: expected KEY or KEY=VALUE"
                )
        return v

    @field_validator("cache_on")
    @classmethod
    def validate_cache_on(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate that every dependency pattern has a glob part."""
        for pattern in v:
            if pattern.startswith(KEY_EXPRESSION_SEPARATOR) or not pattern:
                raise ValueError(f"Dependency pattern {pattern!r} has no glob")
        return v

    @field_validator("secrets")
    @classmethod
    def validate_secrets(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate secret shorthand names."""
        for secret in v:
            if secret.startswith("id="):
                continue
            if not SECRET_ID_PATTERN.match(secret):
                raise ValueError(
                    f"Invalid secret {secret!r}: expected id=... or an "
                    "environment variable name"
                )
        return v

    @property
    def dependency_patterns(self) -> tuple[DependencyPattern, ...]:
        """Parsed cache-on patterns, in configured order."""
        return tuple(DependencyPattern.parse(p) for p in self.cache_on)
