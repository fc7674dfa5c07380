"""Build argument and secret handling."""

from collections.abc import Mapping

from schemas import BuildSpec


def resolve_build_arg(arg: str, env: Mapping[str, str]) -> str:
    """Resolve a build argument to KEY=VALUE form.

    A bare ``KEY`` takes its value from the environment mapping, or the
    empty string when the variable is unset.

    Examples:
        >>> resolve_build_arg("FOO=bar", {})
        "FOO=bar"
        >>> resolve_build_arg("HOME", {"HOME": "/root"})
        "HOME=/root"
        >>> resolve_build_arg("MISSING", {})
        "MISSING="
    """
    if "=" in arg:
        return arg
    return f"{arg}={env.get(arg, '')}"


def docker_build_args(spec: BuildSpec) -> list[str]:
    """Render build arguments for the image builder command line.

    Bare keys are passed through unchanged; the builder resolves them from
    its own environment.
    """
    return [f"--build-arg={arg}" for arg in spec.build_args]


def expand_secret(secret: str) -> str:
    """Expand environment variable shorthand into a full secret definition.

    Examples:
        >>> expand_secret("id=npmrc,src=/home/ci/.npmrc")
        "id=npmrc,src=/home/ci/.npmrc"
        >>> expand_secret("NPM_TOKEN")
        "id=NPM_TOKEN,env=NPM_TOKEN"
    """
    if secret.startswith("id="):
        return secret
    return f"id={secret},env={secret}"


def secret_args(spec: BuildSpec) -> list[str]:
    """Render secrets for the image builder command line."""
    args: list[str] = []
    for secret in spec.secrets:
        args.extend(["--secret", expand_secret(secret)])
    return args
