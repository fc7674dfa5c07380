"""Entry point for python -m docker_cache_tag."""

import sys

from docker_cache_tag.cli import main

if __name__ == "__main__":
    sys.exit(main())
