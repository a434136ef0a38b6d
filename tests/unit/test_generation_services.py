import pytest

from services.content_generator import SocialPostService, clamp_post_count
from services.errors import (
    EmptyOutputError,
    InvalidRequestError,
    ModelsExhaustedError,
    UpstreamStatusError,
    UpstreamTransportError,
)
from services.prompt_builder import ContentBrief, PropertyBrief
from services.property_generator import PropertyDescriptionService

MODELS = ["model-a", "model-b", "model-c", "model-d"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 5),
        (0, 5),
        (-3, 5),
        ("-1", 5),
        (7, 7),
        ("7", 7),
        ("12 posts", 12),
        (7.9, 7),
        (30, 30),
        (45, 30),
        ("abc", 5),
        (True, 5),
    ],
)
def test_clamp_post_count(raw, expected):
    assert clamp_post_count(raw) == expected


@pytest.mark.asyncio
async def test_property_service_falls_back_until_success(upstream):
    upstream.outcomes = [
        UpstreamTransportError("connection reset"),
        UpstreamStatusError(502, "Bad gateway"),
        EmptyOutputError("empty"),
        "  Departamento luminoso en Ñuñoa.  ",
    ]
    service = PropertyDescriptionService(upstream, MODELS)

    result = await service.generate(PropertyBrief(property_type="departamento", location="Ñuñoa"))

    assert result.value == "Departamento luminoso en Ñuñoa."
    assert result.model == "model-d"
    assert upstream.models_called == MODELS
    assert upstream.calls[0]["max_tokens"] == 500
    assert upstream.calls[0]["temperature"] == 0.7
    assert upstream.calls[0]["extra_headers"]["X-Title"] == "InmoDescribe"


@pytest.mark.asyncio
async def test_property_service_rejects_missing_location_without_calling_upstream(upstream):
    service = PropertyDescriptionService(upstream, MODELS)

    with pytest.raises(InvalidRequestError):
        await service.generate(PropertyBrief(property_type="casa", location="  "))

    assert upstream.calls == []


@pytest.mark.asyncio
async def test_social_post_service_retries_on_unparseable_output(upstream):
    upstream.outcomes = [
        "Claro, aquí tienes algunas ideas para tu negocio.",
        '[{"content": "¡Hola!", "hashtags": ["#cafe"]}]',
    ]
    service = SocialPostService(upstream, MODELS)

    result = await service.generate(ContentBrief(business_type="Cafetería", post_count=7))

    assert [post.content for post in result.value] == ["¡Hola!"]
    assert upstream.models_called == ["model-a", "model-b"]
    assert "Genera 7 posts" in upstream.user_prompt(0)
    assert upstream.calls[0]["max_tokens"] == 2000
    assert upstream.calls[0]["extra_headers"]["X-Title"] == "Postfollower"


@pytest.mark.asyncio
async def test_social_post_service_exhaustion_keeps_raw_preview(upstream):
    upstream.outcomes = ["no es json " * 40] * len(MODELS)
    service = SocialPostService(upstream, MODELS)

    with pytest.raises(ModelsExhaustedError) as excinfo:
        await service.generate(ContentBrief(business_type="Cafetería", post_count=5))

    assert len(upstream.calls) == len(MODELS)
    assert excinfo.value.raw_preview == ("no es json " * 40)[:200]


@pytest.mark.asyncio
async def test_social_post_service_rejects_blank_business_type(upstream):
    service = SocialPostService(upstream, MODELS)

    with pytest.raises(InvalidRequestError, match="businessType"):
        await service.generate(ContentBrief(business_type="   ", post_count=5))

    assert upstream.calls == []
