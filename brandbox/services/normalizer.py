import json
import re
from typing import Any, Dict, List, Optional

from ..schemas import Copy
from .composer import MAX_HASHTAGS, unique_hashtags

FIELD_ALIASES: Dict[str, tuple] = {
    "tagline": ("tagline", "title", "headline", "slogan"),
    "caption": ("caption", "post", "body", "text"),
    "short_description": ("shortDescription", "short_description", "description", "summary"),
    "hashtags": ("hashtags", "tags", "hashTags"),
}

# "Tagline:", "**Caption**:", "- Short Description:" ... at the start of a line.
_LABEL_RE = re.compile(
    r"^[ \t]*(?:[-*>]+[ \t]*)?(?:\*\*|__)?"
    r"(tagline|caption|short[ _-]?description|description|hashtags)"
    r"(?:\*\*|__)?[ \t]*:(?:\*\*|__)?",
    re.IGNORECASE | re.MULTILINE,
)
_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")


def default_copy(product: str) -> Copy:
    """Canned copy used for any field a provider response is missing."""
    return Copy(
        tagline=f"Meet {product}",
        caption=f"Say hello to {product}! Fresh look, easy choice.",
        short_description=(
            f"{product} is designed to delight. Crafted with care and ready to impress, "
            "perfect for everyday use."
        ),
        hashtags=["#new", "#musthave", "#style", "#daily", "#love"],
    )


def strip_code_fences(text: str) -> str:
    """
    Remove common markdown wrappers (```json ... ``` or bare ``` ... ```).
    """
    text = (text or "").strip()
    if text.startswith("```"):
        lines = text.splitlines()
        # drop opening fence (may be ``` or ```json)
        lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text.replace("```json", "").replace("```", "")


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Parse the first {...} block in free-form text; None when absent or invalid."""
    match = _JSON_BLOCK_RE.search(text)
    if not match:
        return None
    try:
        parsed = json.loads(match.group(0))
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _clean(value: str) -> str:
    return value.strip().strip("\"'").strip()


def _first_alias(obj: Dict[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES[field]:
        value = obj.get(key)
        if isinstance(value, str) and value.strip():
            return _clean(value)
        if field == "hashtags" and isinstance(value, list) and value:
            return value
    return None


def extract_labeled_fields(text: str) -> Dict[str, str]:
    """Pull 'Key: value' lines out of plain-text model output."""
    matches = list(_LABEL_RE.finditer(text))
    fields: Dict[str, str] = {}
    for idx, match in enumerate(matches):
        label = re.sub(r"[ _-]", "", match.group(1).lower())
        field = "short_description" if label.endswith("description") else label
        if field in fields:
            continue
        end = matches[idx + 1].start() if idx + 1 < len(matches) else len(text)
        chunk = text[match.end():end].strip()
        if field != "short_description":
            chunk = chunk.splitlines()[0] if chunk else ""
        else:
            chunk = " ".join(line.strip() for line in chunk.splitlines() if line.strip())
        chunk = _clean(chunk)
        if chunk:
            fields[field] = chunk
    return fields


def parse_hashtags(value: Any) -> List[str]:
    if isinstance(value, str):
        tokens = re.split(r"[\s,]+", value)
    elif isinstance(value, list):
        tokens = [t for t in value if isinstance(t, str)]
    else:
        return []
    return unique_hashtags(tokens, limit=MAX_HASHTAGS)


def normalize(raw_text: str, product: str) -> Copy:
    """Turn raw provider text into a complete Copy, filling gaps from the canned defaults."""
    fallback = default_copy(product)
    text = strip_code_fences(raw_text)

    fields: Dict[str, Any] = {}
    obj = extract_json_object(text)
    if obj is not None:
        for field in FIELD_ALIASES:
            value = _first_alias(obj, field)
            if value is not None:
                fields[field] = value
    if not fields:
        fields = extract_labeled_fields(text)

    def _text(field: str) -> str:
        value = fields.get(field)
        return value if isinstance(value, str) and value else getattr(fallback, field)

    hashtags = parse_hashtags(fields.get("hashtags")) or fallback.hashtags
    return Copy(
        tagline=_text("tagline"),
        caption=_text("caption"),
        short_description=_text("short_description"),
        hashtags=hashtags,
    )
