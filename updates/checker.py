"""Self-update check against the npm registry.

The check is best-effort: it consults the local cache first, falls back to a
single registry request, classifies failures into readable records, and
never raises into the calling command.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

import httpx

from updates.cache import UpdateCache
from updates.models import UpdateRecord, now_ms
from updates.versions import compare_versions

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_TIMEOUT = 5.0


class UpdateChecker:
    """Decide whether the installed CLI is behind the published release.

    Example:
        >>> checker = UpdateChecker("@codeinspector/cli", "1.0.0", cache)
        >>> record = checker.check()
        >>> record.is_outdated if record else None
    """

    def __init__(
        self,
        package_name: str,
        current_version: str,
        cache: UpdateCache,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the checker.

        Args:
            package_name: Registry name of the CLI package
            current_version: Installed version
            cache: Cache consulted before and written after a lookup
            registry_url: Base URL of the npm registry
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
            clock: Returns the current time in epoch milliseconds
        """
        self.package_name = package_name
        self.current_version = current_version
        self.cache = cache
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.clock = clock

    def check(self) -> UpdateRecord | None:
        """Return update information, or None if nothing could be determined."""
        try:
            cached = self.cache.read()
            if cached:
                return cached

            record = self.fetch_latest()
            self.cache.write(record)
            return record
        except Exception as e:
            logger.debug("Update check failed: %s", e, exc_info=True)
            return None

    def fetch_latest(self) -> UpdateRecord:
        """Query the registry and build a record from the outcome."""
        url = f"{self.registry_url}/{self.package_name}"

        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = client.get(url, headers={"Accept": "application/json"})
                response.raise_for_status()
                data: Any = response.json()

            latest = _latest_tag(data)
            return UpdateRecord(
                current=self.current_version,
                latest=latest,
                is_outdated=compare_versions(self.current_version, latest) < 0,
                timestamp=self.clock(),
                status=200,
                status_text="OK",
            )
        except httpx.HTTPStatusError as e:
            return self._status_failure(e.response)
        except httpx.TimeoutException:
            return UpdateRecord.failure(
                0, "Timeout", "npm registry request timeout", self.clock()
            )
        except httpx.ConnectError:
            return UpdateRecord.failure(
                0, "Connection Error", "Cannot connect to npm registry", self.clock()
            )
        except Exception as e:
            return UpdateRecord.failure(0, "Unknown Error", str(e), self.clock())

    def _status_failure(self, response: httpx.Response) -> UpdateRecord:
        """Classify a non-2xx registry response."""
        status = response.status_code
        reason = response.reason_phrase

        if status == 404:
            error = "Package not found in npm registry"
        elif status >= 500:
            error = f"npm registry error ({status} {reason})"
        elif status >= 400:
            error = f"npm registry request failed ({status} {reason})"
        else:
            return UpdateRecord.failure(
                0, "Unknown Error", f"Unexpected registry response: {status}", self.clock()
            )

        return UpdateRecord.failure(status, reason, error, self.clock())


def _latest_tag(data: Any) -> str:
    """Extract dist-tags.latest from registry metadata."""
    dist_tags = data.get("dist-tags") if isinstance(data, dict) else None
    if not isinstance(dist_tags, dict) or not dist_tags.get("latest"):
        raise ValueError("Invalid response format from npm registry")
    return str(dist_tags["latest"])


class BackgroundUpdateCheck:
    """Run an update check on a daemon thread while a command executes."""

    def __init__(self, checker: UpdateChecker, wait: float = DEFAULT_TIMEOUT) -> None:
        self.checker = checker
        self.wait = wait
        self.result: UpdateRecord | None = None
        self._thread = threading.Thread(
            target=self._run, name="update-check", daemon=True
        )

    def _run(self) -> None:
        self.result = self.checker.check()

    def start(self) -> None:
        self._thread.start()

    def finish(self) -> UpdateRecord | None:
        """Wait up to `wait` seconds for the result."""
        self._thread.join(self.wait)
        if self._thread.is_alive():
            logger.debug("Update check still running, skipping notification")
            return None
        return self.result
