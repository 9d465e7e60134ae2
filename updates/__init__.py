"""Update notification for the CodeInspector CLI.

Checks the npm registry for a newer release of the CLI itself, caching the
answer for a day so that regular commands stay fast.
"""

from updates.cache import CACHE_TTL_MS, UpdateCache
from updates.checker import BackgroundUpdateCheck, UpdateChecker
from updates.models import UpdateRecord
from updates.versions import compare_versions

__all__ = [
    "BackgroundUpdateCheck",
    "CACHE_TTL_MS",
    "UpdateCache",
    "UpdateChecker",
    "UpdateRecord",
    "compare_versions",
]
