"""Customer models as read from the store's customer directory."""

from datetime import date, datetime, time, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """The subset of a store customer the qualification logic reads."""

    model_config = ConfigDict(extra="ignore")

    id: int
    customer_group_id: int = 0

    def is_in_group(self, group_id: int) -> bool:
        return self.customer_group_id == group_id


class QualificationRecord(BaseModel):
    """
    One value of the qualification-date customer attribute.

    The directory returns the stored date as ``attribute_value``; an empty
    value means the customer is not qualified.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    customer_id: int
    attribute_id: int
    value: Optional[str] = Field(default=None, alias="attribute_value")

    @property
    def has_value(self) -> bool:
        return bool(self.value and self.value.strip())

    def qualified_on(self) -> Optional[date]:
        """Parse the stored value as a calendar date, or None if blank."""
        if not self.has_value:
            return None
        return date.fromisoformat(self.value.strip()[:10])

    def qualified_at(self) -> Optional[datetime]:
        """Midnight UTC of the qualification date."""
        day = self.qualified_on()
        if day is None:
            return None
        return datetime.combine(day, time.min, tzinfo=timezone.utc)

    def days_since(self, now: datetime) -> Optional[float]:
        """Fractional days elapsed since qualification, or None if blank."""
        start = self.qualified_at()
        if start is None:
            return None
        return (now - start).total_seconds() / 86400
