"""Order models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LineItem(BaseModel):
    """One product line on an order."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    quantity: int = Field(default=0, ge=0)


class Order(BaseModel):
    """Order header plus its line items."""

    model_config = ConfigDict(extra="ignore")

    id: int
    customer_id: Optional[int] = None
    line_items: List[LineItem] = Field(default_factory=list)

    @property
    def is_guest(self) -> bool:
        return not self.customer_id

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.line_items)
