from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field

from services.errors import EmptyOutputError, PostsParseError

logger = logging.getLogger(__name__)

# Greedy: first "[" through last "]", so prose around the array is ignored.
JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


@dataclass(frozen=True)
class SocialPost:
    content: str
    hashtags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {"content": self.content, "hashtags": list(self.hashtags)}


def extract_description(text: str | None) -> str:
    description = (text or "").strip()
    if not description:
        raise EmptyOutputError("Model returned an empty description.")
    return description


def _normalize_hashtags(raw: object) -> list[str]:
    if isinstance(raw, str):
        candidates = raw.split()
    elif isinstance(raw, list):
        candidates = [item for item in raw if isinstance(item, str)]
    else:
        return []

    hashtags: list[str] = []
    for tag in candidates:
        cleaned = tag.strip()
        if cleaned and cleaned not in hashtags:
            hashtags.append(cleaned)
    return hashtags


def parse_posts(text: str | None) -> list[SocialPost]:
    raw = text or ""
    match = JSON_ARRAY_PATTERN.search(raw)
    if match is None:
        raise PostsParseError("Model output contains no JSON array.", raw)

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise PostsParseError(f"Model output is not valid JSON: {exc.msg}", raw) from exc

    if not isinstance(payload, list):
        raise PostsParseError("Model output is not a JSON array.", raw)

    posts: list[SocialPost] = []
    for item in payload:
        if not isinstance(item, dict):
            logger.debug("Skipping non-object post item: %r", item)
            continue
        content = item.get("content")
        if not isinstance(content, str) or not content.strip():
            logger.debug("Skipping post without content: %r", item)
            continue
        posts.append(
            SocialPost(
                content=content.strip(),
                hashtags=_normalize_hashtags(item.get("hashtags")),
            )
        )

    if not posts:
        raise PostsParseError("Model output contains no usable posts.", raw)
    return posts
