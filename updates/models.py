"""Update-check record schema."""

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class UpdateRecord(BaseModel):
    """Result of one registry lookup, as cached on disk.

    Failed lookups produce a record too: current, latest and is_outdated are
    None and error describes the cause.
    """

    model_config = ConfigDict(populate_by_name=True)

    current: str | None = Field(None, description="Installed CLI version")
    latest: str | None = Field(None, description="Latest published version")
    is_outdated: bool | None = Field(None, alias="isOutdated")
    timestamp: int = Field(..., description="Creation time, epoch milliseconds")
    status: int = Field(..., description="HTTP status, 0 when no response")
    status_text: str = Field("", alias="statusText")
    error: str | None = Field(None, description="Failure description")

    @classmethod
    def failure(
        cls, status: int, status_text: str, error: str, timestamp: int | None = None
    ) -> "UpdateRecord":
        """Build a record for a failed lookup."""
        return cls(
            timestamp=timestamp if timestamp is not None else now_ms(),
            status=status,
            status_text=status_text,
            error=error,
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with the on-disk field names."""
        data = self.model_dump(by_alias=True)
        if data.get("error") is None:
            data.pop("error", None)
        return data
