from __future__ import annotations

from fastapi import Request

from services.content_generator import SocialPostService
from services.property_generator import PropertyDescriptionService


def get_property_service(request: Request) -> PropertyDescriptionService:
    return request.app.state.property_service


def get_social_post_service(request: Request) -> SocialPostService:
    return request.app.state.social_post_service
