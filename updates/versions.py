"""Dotted numeric version comparison."""

VERSION_COMPONENTS = 3


def _components(version: str) -> list[int]:
    """Parse the leading numeric components, defaulting to 0."""
    pieces = str(version).split(".")
    parsed = []
    for i in range(VERSION_COMPONENTS):
        try:
            parsed.append(int(pieces[i]))
        except (IndexError, ValueError):
            parsed.append(0)
    return parsed


def compare_versions(v1: str, v2: str) -> int:
    """Compare two version strings.

    Only major.minor.patch are considered. Missing or non-numeric
    components count as 0, so "2.0" equals "2.0.0".

    Returns:
        -1 if v1 < v2, 0 if equal, 1 if v1 > v2.
    """
    for p1, p2 in zip(_components(v1), _components(v2)):
        if p1 > p2:
            return 1
        if p1 < p2:
            return -1
    return 0
