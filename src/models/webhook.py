"""Inbound webhook payloads."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from utils.validators import parse_positive_int


class WebhookData(BaseModel):
    """The ``data`` block of a store webhook."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[Union[int, str]] = None
    type: Optional[str] = None
    order_id: Optional[int] = Field(default=None, alias="orderId")


class WebhookEvent(BaseModel):
    """Store webhook envelope: ``{scope, data: {id}, created_at}``."""

    model_config = ConfigDict(extra="ignore")

    scope: str = ""
    data: WebhookData = Field(default_factory=WebhookData)
    created_at: Optional[int] = None
    store_id: Optional[str] = None
    hash: Optional[str] = None

    @property
    def dedup_key(self) -> str:
        """Identity of one delivery: scope, subject id and creation time."""
        return f"{self.scope}-{self.data.id}-{self.created_at}"

    def order_id(self) -> Optional[int]:
        """
        The order this event refers to.

        Order events carry it as ``data.id``; cart-converted events carry the
        cart id there and the new order's id in ``data.orderId``.
        """
        if self.scope == "store/cart/converted":
            return parse_positive_int(self.data.order_id)
        return parse_positive_int(self.data.id)
