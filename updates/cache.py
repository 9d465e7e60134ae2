"""Local cache for the update check.

A single JSON record stored under the user's configuration directory. The
record is trusted for 24 hours; after that it behaves as if it was never
written. Reading and writing never raise.
"""

import json
import logging
from pathlib import Path
from typing import Callable

from updates.models import UpdateRecord, now_ms

logger = logging.getLogger(__name__)

CACHE_TTL_MS = 24 * 60 * 60 * 1000


class UpdateCache:
    """Timestamped update-check record on disk."""

    def __init__(
        self,
        path: Path,
        ttl_ms: int = CACHE_TTL_MS,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the cache.

        Args:
            path: Cache file location
            ttl_ms: Maximum record age in milliseconds
            clock: Returns the current time in epoch milliseconds
        """
        self.path = Path(path)
        self.ttl_ms = ttl_ms
        self.clock = clock

    def read(self, now: int | None = None) -> UpdateRecord | None:
        """Return the cached record, or None if absent, unreadable or stale."""
        try:
            if not self.path.exists():
                return None

            record = UpdateRecord.model_validate_json(self.path.read_text(encoding="utf-8"))
            age = (now if now is not None else self.clock()) - record.timestamp

            if age > self.ttl_ms:
                logger.debug("Update cache expired (%d ms old)", age)
                return None

            return record
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable update cache %s: %s", self.path, e)
            return None

    def write(self, record: UpdateRecord) -> None:
        """Replace the cached record. Failures are logged and ignored."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record.to_json_dict()), encoding="utf-8")
        except OSError as e:
            logger.debug("Could not write update cache %s: %s", self.path, e)
