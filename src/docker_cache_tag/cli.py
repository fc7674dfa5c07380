"""Command-line interface for docker-cache-tag."""

import argparse
import logging
import os
import platform
import shlex
import sys
import traceback
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import ValidationError

from docker_cache_tag import __version__
from docker_cache_tag.arguments import docker_build_args, secret_args
from docker_cache_tag.errors import (
    EXIT_CONFIG_ERROR,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    EXIT_UNEXPECTED_ERROR,
    CacheTagError,
)
from docker_cache_tag.fingerprint import compute_fingerprint
from docker_cache_tag.loader import (
    build_spec,
    load_settings_from_env,
    load_settings_from_file,
)

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Configure logging based on verbosity
    setup_logging(args)

    env = MappingProxyType(dict(os.environ))
    cwd = Path(args.directory)

    try:
        if not cwd.is_dir():
            return _fail(f"Working directory does not exist: {cwd}", cwd)

        spec = build_spec(*_settings_layers(args, env, cwd))
        logger.debug(f"Build spec: {spec!r}")

        fingerprint = compute_fingerprint(spec, env, cwd)

        if args.explain:
            for record in fingerprint.records:
                print(record, file=sys.stderr)

        print(fingerprint.tag)
        if args.print_build_args:
            print(shlex.join(docker_build_args(spec) + secret_args(spec)))

        return EXIT_SUCCESS

    except CacheTagError as e:
        logger.debug("Tag computation failed", exc_info=args.debug)
        return _fail(str(e), cwd, e.exit_code)

    except ValidationError as e:
        logger.error("Invalid build configuration")
        return _fail(f"Invalid build configuration\n{e}", cwd)

    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Cannot load configuration: {e}")
        return _fail(f"Cannot load configuration: {e}", cwd)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug or args.verbose:
            traceback.print_exc()
        return _fail(f"Unexpected error: {e}", cwd, EXIT_UNEXPECTED_ERROR)


def _settings_layers(
    args: argparse.Namespace, env: MappingProxyType, cwd: Path
) -> list[dict[str, Any]]:
    """Collect settings layers in increasing order of precedence."""
    layers: list[dict[str, Any]] = [{"architecture": platform.machine()}]

    if args.from_env:
        layers.append(load_settings_from_env(env))

    if args.config:
        layers.append(load_settings_from_file(cwd / args.config))

    layers.append(
        {
            "dockerfile": args.dockerfile,
            "target": args.target,
            "architecture": args.arch,
            "build_args": args.build_args,
            "additional_build_args": args.additional_build_args,
            "cache_on": args.cache_on,
            "secrets": args.secrets,
        }
    )
    return layers


def _fail(message: str, cwd: Path, exit_code: int = EXIT_CONFIG_ERROR) -> int:
    """Report a fatal error on stderr and return its exit code."""
    print(f"In {cwd.resolve()}", file=sys.stderr)
    print(f"ERROR: {message}", file=sys.stderr)
    return exit_code


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser for the tag command.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="docker-cache-tag",
        description="Compute a deterministic cache tag for a container image build",
        epilog="Settings from --config and --from-env are overridden by flags.",
    )

    # Input sources
    parser.add_argument(
        "-C",
        "--directory",
        metavar="DIR",
        default=".",
        help="Directory that paths and patterns are relative to (default: .)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="YAML file with build settings",
    )
    parser.add_argument(
        "--from-env",
        action="store_true",
        help="Read settings from BUILDKITE_PLUGIN_DOCKER_ECR_CACHE_* variables",
    )

    # Build inputs
    parser.add_argument(
        "-f",
        "--dockerfile",
        metavar="PATH",
        help="Path to the Dockerfile (default: Dockerfile)",
    )
    parser.add_argument("--target", metavar="STAGE", help="Build stage to target")
    parser.add_argument(
        "--arch",
        metavar="NAME",
        help="Architecture name (default: this machine's, e.g. x86_64)",
    )
    parser.add_argument(
        "--build-arg",
        dest="build_args",
        action="append",
        metavar="KEY[=VALUE]",
        help="Build argument; a bare KEY takes its value from the environment "
        "(repeatable)",
    )
    parser.add_argument(
        "--cache-on",
        action="append",
        metavar="PATTERN",
        help="Glob of files whose content affects the tag, optionally "
        "followed by #<jq expression> (repeatable)",
    )
    parser.add_argument(
        "--secret",
        dest="secrets",
        action="append",
        metavar="SECRET",
        help="Build secret as id=...,src=... or an environment variable name "
        "(repeatable, not part of the tag)",
    )
    parser.add_argument(
        "--additional-build-args",
        metavar="ARGS",
        help="Extra builder arguments, hashed as a single string",
    )

    # Output options
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the digests that make up the tag to stderr",
    )
    parser.add_argument(
        "--print-build-args",
        action="store_true",
        help="Print builder arguments on a second line after the tag",
    )

    # Verbosity options
    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (show hashed inputs)",
    )
    verbosity_group.add_argument(
        "--debug", action="store_true", help="Debug output (show all details)"
    )
    verbosity_group.add_argument(
        "-q", "--quiet", action="store_true", help="Quiet mode (errors only)"
    )

    # Version
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging based on command-line arguments.

    Args:
        args: Parsed command-line arguments
    """
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
