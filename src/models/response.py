"""Response bodies for the storefront-facing endpoints."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class JustQualifiedResponse(BaseModel):
    """Popup check result for one customer."""

    model_config = ConfigDict(populate_by_name=True)

    just_qualified: bool = Field(default=False, serialization_alias="justQualified")
    is_vip: bool = Field(default=False, serialization_alias="isVIP")
    days_left: int = Field(default=0, serialization_alias="daysLeft")
    discount_percent: Optional[int] = Field(default=None, serialization_alias="discountPercent")
    qualified_date: Optional[str] = Field(default=None, serialization_alias="qualifiedDate")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class VipInfo(BaseModel):
    """Public description of the VIP programme."""

    vip_group_id: int = Field(serialization_alias="vipGroupId")
    discount_percent: int = Field(serialization_alias="discountPercent")
    min_quantity: int = Field(serialization_alias="minQuantity")
    discount_days: int = Field(serialization_alias="discountDays")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
