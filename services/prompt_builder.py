from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

NOT_SPECIFIED = "No especificado"

PROPERTY_SYSTEM_PROMPT = (
    "Eres un experto copywriter inmobiliario chileno. Tu trabajo es crear descripciones "
    "atractivas y profesionales para propiedades en venta o arriendo. Usa un lenguaje "
    "persuasivo pero natural, destaca los beneficios y crea una conexión emocional con el "
    "comprador potencial. Incluye emojis apropiados pero no exageres. Escribe en español chileno."
)

CONTENT_SYSTEM_PROMPT = """
Eres un experto en marketing de redes sociales y community management.
Creas contenido atractivo, con emojis apropiados y hashtags relevantes en español.
Cada post debe ser único y variado en formato (pregunta, consejo, historia, promoción, etc.).
Responde SOLO con un JSON array de objetos con formato: [{"content": "texto del post", "hashtags": ["#tag1", "#tag2"]}]
""".strip()

PROPERTY_PROMPT_TEMPLATE = """
Genera una descripción atractiva para esta propiedad:

Tipo: {property_type}
Habitaciones: {rooms}
Baños: {bathrooms}
Tamaño: {size}
Ubicación: {location}
Características: {features}
Estilo de escritura: {style}

Escribe una descripción de 100-150 palabras que destaque los beneficios y genere interés.
""".strip()

CONTENT_PROMPT_TEMPLATE = """
Genera {post_count} posts para redes sociales:

Negocio: {business_type}
{business_desc_line}Tono: {tone}
Red social: {network} ({network_format})

Requisitos:
- Posts únicos y variados
- Emojis apropiados
- Mezcla tipos: tips, preguntas, promociones, behind the scenes
- Hashtags relevantes
- Español chileno/latinoamericano

Responde SOLO con el JSON array.
""".strip()

DEFAULT_STYLE = "profesional"
DEFAULT_TONE = "profesional"
DEFAULT_NETWORK = "instagram"

STYLE_DESCRIPTIONS = {
    "profesional": "formal y profesional",
    "emocional": "emotivo y que conecte con el comprador",
    "minimalista": "conciso y elegante",
    "detallado": "muy detallado y exhaustivo",
}

TONE_DESCRIPTIONS = {
    "profesional": "formal y profesional, enfocado en expertise",
    "cercano": "amigable y cercano, como un amigo",
    "inspiracional": "motivador e inspiracional",
    "humoristico": "con humor ligero y entretenido",
    "educativo": "informativo y educativo",
}

NETWORK_FORMATS = {
    "instagram": "posts visuales con 3-5 hashtags, máximo 150 palabras",
    "facebook": "posts conversacionales, 1-3 hashtags",
    "linkedin": "contenido profesional y de valor",
    "twitter": "tweets de máximo 280 caracteres",
    "tiktok": "descripciones cortas y llamativas",
}

Role = Literal["system", "user"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class PropertyBrief:
    property_type: str
    location: str
    rooms: str | None = None
    bathrooms: str | None = None
    size: str | None = None
    features: str | None = None
    style: str | None = None


@dataclass(frozen=True)
class ContentBrief:
    business_type: str
    post_count: int
    business_desc: str | None = None
    tone: str | None = None
    network: str | None = None


def _normalize_key(value: str | None) -> str:
    return (value or "").strip().lower()


def _lookup(table: dict[str, str], value: str | None, default: str) -> str:
    return table.get(_normalize_key(value), table[default])


def _or_placeholder(value: str | None, placeholder: str = NOT_SPECIFIED) -> str:
    if value is None or not str(value).strip():
        return placeholder
    return str(value).strip()


def describe_style(style: str | None) -> str:
    return _lookup(STYLE_DESCRIPTIONS, style, DEFAULT_STYLE)


def describe_tone(tone: str | None) -> str:
    return _lookup(TONE_DESCRIPTIONS, tone, DEFAULT_TONE)


def describe_network(network: str | None) -> str:
    return _lookup(NETWORK_FORMATS, network, DEFAULT_NETWORK)


def build_property_prompt(brief: PropertyBrief) -> str:
    size = _or_placeholder(brief.size)
    return PROPERTY_PROMPT_TEMPLATE.format(
        property_type=brief.property_type.strip(),
        rooms=_or_placeholder(brief.rooms),
        bathrooms=_or_placeholder(brief.bathrooms),
        size=size if size == NOT_SPECIFIED else f"{size} m²",
        location=brief.location.strip(),
        features=_or_placeholder(brief.features, "No especificadas"),
        style=describe_style(brief.style),
    )


def build_content_prompt(brief: ContentBrief) -> str:
    business_desc = _or_placeholder(brief.business_desc, "")
    return CONTENT_PROMPT_TEMPLATE.format(
        post_count=brief.post_count,
        business_type=brief.business_type.strip(),
        business_desc_line=f"Descripción: {business_desc}\n" if business_desc else "",
        tone=describe_tone(brief.tone),
        network=_normalize_key(brief.network) or DEFAULT_NETWORK,
        network_format=describe_network(brief.network),
    )


def build_messages(system_prompt: str, user_prompt: str) -> tuple[ChatMessage, ...]:
    return (
        ChatMessage(role="system", content=system_prompt),
        ChatMessage(role="user", content=user_prompt),
    )
