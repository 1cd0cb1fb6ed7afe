import base64
import logging
from typing import List, Optional
from urllib.parse import quote
from xml.sax.saxutils import escape

import httpx
from openai import OpenAI, OpenAIError

from ..config import PEXELS_SEARCH_URL, REQUEST_TIMEOUT_S, Settings
from ..schemas import Brief

logger = logging.getLogger(__name__)

PHOTOS_PER_QUERY = 6
MAX_PHOTOS = 6
PLACEHOLDER_LABEL_CHARS = 28

# Preferred rendition order: the web-sized renditions come before the full-size original.
PEXELS_RENDITIONS = ("large2x", "large", "original", "medium")

POSTER_PROMPT_SUFFIX = (
    "No words on the image; product-focused visuals; centered composition; soft shadows."
)


def _join(*parts: str) -> str:
    return " ".join(p.strip() for p in parts if p and p.strip())


def build_image_queries(brief: Brief) -> List[str]:
    """Ordered, case-insensitively unique stock-photo search queries for a brief."""
    base = brief.image_query.strip() or _join(brief.product, brief.category, brief.image_style, brief.color_hint)
    candidates = [
        base,
        _join(brief.product, brief.category, "product photo", brief.image_style),
        _join(brief.product, "studio, minimal"),
    ]
    queries: List[str] = []
    seen = set()
    for query in candidates:
        key = query.lower()
        if query and key not in seen:
            seen.add(key)
            queries.append(query)
    return queries


def placeholder_svg(product: str) -> str:
    label = (product or "").strip() or "Your product"
    if len(label) > PLACEHOLDER_LABEL_CHARS:
        label = label[:PLACEHOLDER_LABEL_CHARS] + "…"
    return f"""
<svg xmlns="http://www.w3.org/2000/svg" width="1024" height="1024">
  <defs>
    <linearGradient id="g" x1="0" y1="0" x2="1" y2="1">
      <stop offset="0" stop-color="#222"/>
      <stop offset="1" stop-color="#666"/>
    </linearGradient>
  </defs>
  <rect width="100%" height="100%" fill="url(#g)"/>
  <circle cx="512" cy="512" r="280" fill="#fff" opacity="0.08"/>
  <circle cx="680" cy="380" r="160" fill="#fff" opacity="0.05"/>
  <text x="50%" y="52%" text-anchor="middle"
        font-family="Inter, Arial, sans-serif" font-size="64"
        fill="#ffffff" opacity="0.95">{escape(label)}</text>
</svg>"""


def placeholder_data_url(product: str) -> str:
    b64 = base64.b64encode(placeholder_svg(product).encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{b64}"


def fallback_image_urls(product: str) -> List[str]:
    """Keyword photo endpoints a client can walk through when the primary images fail to load."""
    topic = (product or "").strip() or "product"
    tags = ",".join(quote(w, safe="") for w in topic.split())
    return [
        f"https://source.unsplash.com/1024x1024/?{quote(topic, safe='')}",
        f"https://loremflickr.com/1024/1024/{tags}",
        f"https://picsum.photos/seed/{quote(topic, safe='')}/1024/1024",
        placeholder_data_url(topic),
    ]


class PexelsImageSearch:
    """Fetch square stock photos from Pexels."""

    def __init__(self, api_key: str, http_client: Optional[httpx.Client] = None):
        self._api_key = api_key
        self._client = http_client or httpx.Client(timeout=REQUEST_TIMEOUT_S)

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["PexelsImageSearch"]:
        return cls(settings.pexels_api_key) if settings.has_pexels else None

    def search(self, query: str, per_page: int = PHOTOS_PER_QUERY) -> List[str]:
        response = self._client.get(
            PEXELS_SEARCH_URL,
            headers={"Authorization": self._api_key},
            params={"query": query, "per_page": per_page, "orientation": "square"},
        )
        response.raise_for_status()
        urls: List[str] = []
        for photo in response.json().get("photos") or []:
            src = photo.get("src") or {}
            url = next((src[k] for k in PEXELS_RENDITIONS if src.get(k)), None)
            if url:
                urls.append(url)
        return urls

    def resolve(self, brief: Brief, limit: int = MAX_PHOTOS) -> List[str]:
        urls: List[str] = []
        for query in build_image_queries(brief):
            try:
                found = self.search(query)
            except (httpx.HTTPError, ValueError, AttributeError) as exc:
                logger.warning("Pexels search failed for %r: %s", query, exc)
                continue
            for url in found:
                if url not in urls:
                    urls.append(url)
            if len(urls) >= limit:
                break
        return urls[:limit]


def resolve_images(brief: Brief, image_search: Optional[PexelsImageSearch]) -> List[str]:
    """Stock-photo candidates for a brief; empty when the provider is unconfigured or down."""
    if image_search is None:
        return []
    return image_search.resolve(brief)


class OpenAIPosterGenerator:
    """Render a text-free product poster with the OpenAI images API."""

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["OpenAIPosterGenerator"]:
        if not settings.has_openai:
            return None
        client = OpenAI(api_key=settings.openai_api_key, timeout=REQUEST_TIMEOUT_S, max_retries=0)
        return cls(client, settings.openai_image_model)

    def build_prompt(self, brief: Brief) -> str:
        return (
            f"High-quality marketing poster for: {brief.product.strip()}.\n"
            f"Style: {brief.image_style.strip() or 'clean, modern, minimal'}\n"
            f"Primary colors hint: {brief.color_hint.strip() or 'brand neutral'}\n"
            f"{POSTER_PROMPT_SUFFIX}"
        )

    def generate(self, brief: Brief) -> Optional[str]:
        try:
            image_response = self.client.images.generate(
                model=self.model,
                prompt=self.build_prompt(brief),
                size="1024x1024",
            )
            b64 = image_response.data[0].b64_json
        except (OpenAIError, IndexError, AttributeError, TypeError) as exc:
            logger.warning("Poster generation failed: %s", exc)
            return None
        return f"data:image/png;base64,{b64}" if b64 else None
