# authgate/shared/utils/path_rules.py

from fnmatch import fnmatchcase
from typing import Iterable


def path_matches(path: str, patterns: Iterable[str]) -> bool:
    """
    Whether a request path is covered by any of the patterns.

    - ``/api/init/`` (trailing slash): the path itself without the slash and everything below it
    - ``/static/*``: shell-style wildcard
    - anything else: exact match
    """
    for pattern in patterns:
        if "*" in pattern:
            if fnmatchcase(path, pattern):
                return True
        elif pattern.endswith("/") and len(pattern) > 1:
            if path.startswith(pattern) or path == pattern.rstrip("/"):
                return True
        elif path == pattern:
            return True
    return False
