"""Source file discovery by glob patterns."""

import re
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path

_BRACES = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, which pathlib globbing does not support.

    >>> expand_braces("src/**/*.{ts,tsx}")
    ['src/**/*.ts', 'src/**/*.tsx']
    """
    match = _BRACES.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    return [
        expanded
        for option in match.group(1).split(",")
        for expanded in expand_braces(f"{head}{option}{tail}")
    ]


def discover_sources(root: Path, patterns: Iterable[str], excludes: Iterable[str] = ()) -> list[Path]:
    """Files under root matching any pattern and no exclude, sorted by path."""
    exclude_patterns = [expanded for pattern in excludes for expanded in expand_braces(pattern)]
    found: dict[str, Path] = {}
    for pattern in patterns:
        for expanded in expand_braces(pattern):
            for path in root.glob(expanded):
                if not path.is_file():
                    continue
                relative = path.relative_to(root).as_posix()
                if any(fnmatch(relative, exclude) for exclude in exclude_patterns):
                    continue
                found[relative] = path
    return [found[relative] for relative in sorted(found)]
