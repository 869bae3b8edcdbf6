"""
Input items and per-item results for batch dispatch.

Each WorkItem names a resource, an operation and the already-validated
parameters the host extracted for it. Each ItemResult carries one output
record tagged with the index of the item that produced it.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..constants import OperationType, ResourceType


class WorkItem(BaseModel):
    """One input item of a batch."""

    resource: ResourceType = Field(description="Resource kind")
    operation: OperationType = Field(description="Operation on the resource")
    parameters: Dict[str, Any] = Field(
        default_factory=dict, description="Typed parameters for this item"
    )


class ItemResult(BaseModel):
    """
    One output record of a batch.

    Successful items produce one result per returned record. Failed items
    produce a single result whose record is ``{"error": <message>}``.
    """

    item_index: int = Field(ge=0, description="Index of the originating input item")
    record: Dict[str, Any] = Field(default_factory=dict, description="Output record")
    success: bool = Field(default=True, description="Whether the item succeeded")
    error_message: Optional[str] = Field(default=None, description="Error message on failure")
    error_code: Optional[str] = Field(default=None, description="Error code on failure")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), description="Result creation timestamp"
    )

    @classmethod
    def success_result(cls, item_index: int, record: Any) -> "ItemResult":
        """
        Create a result for one returned record.

        Non-mapping records (e.g. a bare string body) are wrapped under "data".
        """
        if record is None:
            record = {}
        elif not isinstance(record, dict):
            record = {"data": record}
        return cls(item_index=item_index, record=record, success=True)

    @classmethod
    def failure_result(
        cls,
        item_index: int,
        error_message: str,
        error_code: Optional[str] = None,
    ) -> "ItemResult":
        """Create an item-scoped error record."""
        return cls(
            item_index=item_index,
            record={"error": error_message},
            success=False,
            error_message=error_message,
            error_code=error_code,
        )
