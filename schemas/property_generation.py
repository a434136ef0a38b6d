from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from services.prompt_builder import PropertyBrief

NumericText = str | int | float | None


def _as_text(value: NumericText) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


class PropertyGenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    property_type: str | None = Field(default=None, alias="propertyType", max_length=200)
    location: str | None = Field(default=None, max_length=300)
    rooms: NumericText = None
    bathrooms: NumericText = None
    size: NumericText = None
    features: str | None = Field(default=None, max_length=2000)
    style: str | None = Field(default=None, max_length=50)

    def to_brief(self) -> PropertyBrief:
        return PropertyBrief(
            property_type=self.property_type or "",
            location=self.location or "",
            rooms=_as_text(self.rooms),
            bathrooms=_as_text(self.bathrooms),
            size=_as_text(self.size),
            features=self.features,
            style=self.style,
        )


class PropertyGenerationResponse(BaseModel):
    success: Literal[True] = True
    description: str
