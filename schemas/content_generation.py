from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from services.content_generator import clamp_post_count
from services.prompt_builder import ContentBrief


class ContentGenerationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    business_type: str | None = Field(default=None, alias="businessType", max_length=200)
    business_desc: str | None = Field(default=None, alias="businessDesc", max_length=2000)
    tone: str | None = Field(default=None, max_length=50)
    network: str | None = Field(default=None, max_length=50)
    # Clamped rather than validated, so any scalar is accepted here.
    post_count: str | int | float | None = Field(default=None, alias="postCount")

    def to_brief(self) -> ContentBrief:
        return ContentBrief(
            business_type=self.business_type or "",
            post_count=clamp_post_count(self.post_count),
            business_desc=self.business_desc,
            tone=self.tone,
            network=self.network,
        )


class SocialPostResponse(BaseModel):
    content: str
    hashtags: list[str]


class ContentGenerationResponse(BaseModel):
    success: Literal[True] = True
    posts: list[SocialPostResponse]
