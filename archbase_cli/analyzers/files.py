"""File discovery with glob include/exclude patterns.

Patterns are relative to the scan root and support brace groups
(``**/*.{ts,tsx}``). Excluded directories are pruned during the walk so
``node_modules`` is never descended into.
"""

from __future__ import annotations

import os
import re
from fnmatch import fnmatchcase
from pathlib import Path

_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """``"a.{ts,tsx}"`` -> ``["a.ts", "a.tsx"]``. Nested groups expand inside out."""
    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        for candidate in expand_braces(head + option + tail):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def matches(rel_path: str, pattern: str) -> bool:
    if fnmatchcase(rel_path, pattern):
        return True
    # "**/" also matches zero directories
    while pattern.startswith("**/"):
        pattern = pattern[3:]
        if fnmatchcase(rel_path, pattern):
            return True
    return False


def _any_match(rel_path: str, patterns: list[str]) -> bool:
    return any(matches(rel_path, p) for p in patterns)


def find_files(
    root: str | Path,
    include: list[str],
    exclude: list[str] | None = None,
) -> list[Path]:
    """Return files under *root* matching any include and no exclude pattern, sorted."""
    root = Path(root)
    includes = [p for pattern in include for p in expand_braces(pattern)]
    excludes = [p for pattern in (exclude or []) for p in expand_braces(pattern)]

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = sorted(d for d in dirnames if not _any_match(f"{prefix}{d}/", excludes))
        for name in sorted(filenames):
            rel = prefix + name
            if _any_match(rel, includes) and not _any_match(rel, excludes):
                found.append(Path(dirpath) / name)
    return sorted(found)
