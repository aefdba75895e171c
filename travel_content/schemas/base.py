"""Shared pydantic base for all travel content models."""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


class TravelModel(BaseModel):
    """
    Base model with camelCase wire names.

    Attributes are snake_case in Python; JSON produced by ``to_dict`` uses the
    camelCase names consumers of the pipeline expect (``sourceUrl``,
    ``dailyPlans``, ``hierarchicalPath``...). Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict using wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
