import pytest

from services.prompt_builder import (
    NETWORK_FORMATS,
    STYLE_DESCRIPTIONS,
    TONE_DESCRIPTIONS,
    ContentBrief,
    PropertyBrief,
    build_content_prompt,
    build_messages,
    build_property_prompt,
)


def test_property_prompt_includes_all_fields():
    brief = PropertyBrief(
        property_type="departamento",
        location="Providencia, Santiago",
        rooms="2",
        bathrooms="1",
        size="60",
        features="Terraza, estacionamiento",
        style="emocional",
    )
    prompt = build_property_prompt(brief)

    assert "Tipo: departamento" in prompt
    assert "Habitaciones: 2" in prompt
    assert "Baños: 1" in prompt
    assert "Tamaño: 60 m²" in prompt
    assert "Ubicación: Providencia, Santiago" in prompt
    assert "Características: Terraza, estacionamiento" in prompt
    assert f"Estilo de escritura: {STYLE_DESCRIPTIONS['emocional']}" in prompt


def test_property_prompt_uses_placeholders_for_missing_fields():
    prompt = build_property_prompt(PropertyBrief(property_type="casa", location="Viña del Mar"))

    assert "Habitaciones: No especificado" in prompt
    assert "Baños: No especificado" in prompt
    assert "Tamaño: No especificado" in prompt
    assert "m²" not in prompt
    assert "Características: No especificadas" in prompt


@pytest.mark.parametrize("style", [None, "", "barroco", "  "])
def test_unknown_style_falls_back_to_professional(style):
    prompt = build_property_prompt(PropertyBrief(property_type="casa", location="Temuco", style=style))
    assert f"Estilo de escritura: {STYLE_DESCRIPTIONS['profesional']}" in prompt


def test_style_lookup_ignores_case_and_whitespace():
    prompt = build_property_prompt(PropertyBrief(property_type="casa", location="Temuco", style=" Minimalista "))
    assert STYLE_DESCRIPTIONS["minimalista"] in prompt


def test_content_prompt_encodes_post_count_and_lookups():
    brief = ContentBrief(
        business_type="Cafetería",
        post_count=7,
        business_desc="Café de especialidad en Ñuñoa",
        tone="cercano",
        network="linkedin",
    )
    prompt = build_content_prompt(brief)

    assert prompt.startswith("Genera 7 posts para redes sociales:")
    assert "Negocio: Cafetería" in prompt
    assert "Descripción: Café de especialidad en Ñuñoa" in prompt
    assert f"Tono: {TONE_DESCRIPTIONS['cercano']}" in prompt
    assert f"Red social: linkedin ({NETWORK_FORMATS['linkedin']})" in prompt
    assert prompt.endswith("Responde SOLO con el JSON array.")


def test_content_prompt_defaults_for_unknown_enums():
    brief = ContentBrief(business_type="Panadería", post_count=5, tone="sarcástico", network="myspace")
    prompt = build_content_prompt(brief)

    assert f"Tono: {TONE_DESCRIPTIONS['profesional']}" in prompt
    assert f"({NETWORK_FORMATS['instagram']})" in prompt
    assert "Descripción:" not in prompt


def test_content_prompt_without_network_uses_instagram():
    prompt = build_content_prompt(ContentBrief(business_type="Gimnasio", post_count=3))
    assert f"Red social: instagram ({NETWORK_FORMATS['instagram']})" in prompt


def test_build_messages_orders_system_before_user():
    messages = build_messages("sistema", "usuario")

    assert [message.role for message in messages] == ["system", "user"]
    assert messages[1].to_dict() == {"role": "user", "content": "usuario"}
