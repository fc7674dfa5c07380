"""Schema definitions for cache tag inputs."""

from .build import BuildSpec, DependencyPattern

__all__ = [
    "BuildSpec",
    "DependencyPattern",
]
