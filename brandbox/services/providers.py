import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

import httpx
from openai import OpenAI, OpenAIError

from ..config import GROQ_BASE_URL, REQUEST_TIMEOUT_S, Settings
from ..schemas import Brief, ProviderId

logger = logging.getLogger(__name__)

FACTUALITY_RULES = (
    "Use only facts stated in the brief. Do not invent ingredients, materials, specs, prices, "
    "certifications, awards or health claims. Mention the product name exactly as given."
)

GROQ_FALLBACK_MODELS = ("llama3-8b-8192", "mixtral-8x7b-32768")


def _brief_lines(brief: Brief) -> str:
    return (
        f"Product: {brief.product.strip()}\n"
        f"Category: {brief.category.strip() or 'unspecified'}\n"
        f"Key benefit: {brief.key_benefit.strip() or 'unspecified'}\n"
        f"Audience: {brief.audience.strip() or 'general consumers'}\n"
        f"Tone: {brief.tone.strip() or 'friendly'}\n"
        f"Platform: {brief.platform.strip() or 'Instagram'}\n"
    )


def build_json_prompt(brief: Brief) -> str:
    return f"""
Return ONLY JSON with keys:
- "tagline" (<=8 words, must include the product name)
- "caption" (one sentence, <=140 chars, must include the product name)
- "shortDescription" (<=3 sentences)
- "hashtags" (array of 5 short tags)

{FACTUALITY_RULES}
If a category or key benefit is given, work it into the tagline or caption.

{_brief_lines(brief)}"""


def build_lines_prompt(brief: Brief) -> str:
    return f"""
Write marketing copy as four labeled lines and nothing else:
Tagline: <=8 words, includes the product name
Caption: one sentence that includes the product name
Short Description: up to 3 sentences
Hashtags: 5 short hashtags separated by spaces

{FACTUALITY_RULES}

{_brief_lines(brief)}"""


class ProviderReply(NamedTuple):
    text: str
    model: str


class CopyProvider:
    """
    One tier of the copy fallback chain.

    Subclasses implement ``_complete``; ``try_generate`` walks the model and
    prompt variants and turns every transport failure into ``None`` so the
    caller can move on to the next tier. Providers are shared across
    requests, so a reply carries its own model instead of storing it on
    the instance.
    """

    provider_id: ProviderId = "fallback"
    transport_errors: Tuple[type, ...] = (ValueError, KeyError, TypeError, IndexError, AttributeError)

    def __init__(self, models: Sequence[str]):
        self.models: List[str] = list(dict.fromkeys(m for m in models if m))

    def prompts(self, brief: Brief) -> List[Tuple[str, bool]]:
        """Prompt variants in order, each paired with whether it asks for a JSON object."""
        return [(build_json_prompt(brief), True), (build_lines_prompt(brief), False)]

    def try_generate(self, brief: Brief) -> Optional[ProviderReply]:
        for model in self.models:
            for prompt, wants_json in self.prompts(brief):
                try:
                    text = self._complete(prompt, model, wants_json)
                except self.transport_errors as exc:
                    logger.warning("%s model %s failed: %s", self.provider_id, model, exc)
                    break
                if text and text.strip():
                    return ProviderReply(text.strip(), model)
                logger.info("%s model %s returned empty content", self.provider_id, model)
        return None

    def _complete(self, prompt: str, model: str, wants_json: bool) -> str:
        raise NotImplementedError


class ChatCompletionsProvider(CopyProvider):
    """Any OpenAI-compatible chat completions endpoint, driven through the openai SDK."""

    transport_errors = CopyProvider.transport_errors + (OpenAIError,)
    json_mode = False

    def __init__(self, client: OpenAI, models: Sequence[str]):
        super().__init__(models)
        self.client = client

    def _complete(self, prompt: str, model: str, wants_json: bool) -> str:
        kwargs = {}
        if self.json_mode and wants_json:
            kwargs["response_format"] = {"type": "json_object"}
        response = self.client.chat.completions.create(
            model=model,
            temperature=0.7,
            messages=[
                {"role": "system", "content": "You write short, accurate marketing copy. No commentary."},
                {"role": "user", "content": prompt},
            ],
            **kwargs,
        )
        return response.choices[0].message.content or ""


class OpenAIProvider(ChatCompletionsProvider):
    provider_id: ProviderId = "primary-cloud"
    json_mode = True

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIProvider":
        client = OpenAI(api_key=settings.openai_api_key, timeout=REQUEST_TIMEOUT_S, max_retries=0)
        return cls(client, [settings.openai_model])


class GroqProvider(ChatCompletionsProvider):
    provider_id: ProviderId = "secondary-cloud"

    @classmethod
    def from_settings(cls, settings: Settings) -> "GroqProvider":
        client = OpenAI(
            api_key=settings.groq_api_key,
            base_url=GROQ_BASE_URL,
            timeout=REQUEST_TIMEOUT_S,
            max_retries=0,
        )
        return cls(client, [settings.groq_model, *GROQ_FALLBACK_MODELS])


class OllamaProvider(CopyProvider):
    provider_id: ProviderId = "local"
    transport_errors = CopyProvider.transport_errors + (httpx.HTTPError,)

    def __init__(self, base_url: str, model: str, http_client: Optional[httpx.Client] = None):
        super().__init__([model])
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client or httpx.Client(timeout=REQUEST_TIMEOUT_S)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaProvider":
        return cls(settings.ollama_base_url, settings.ollama_model)

    def _complete(self, prompt: str, model: str, wants_json: bool) -> str:
        response = self.http_client.post(
            f"{self.base_url}/api/generate",
            json={
                "model": model,
                "prompt": prompt,
                "stream": False,
                "options": {"num_ctx": 2048, "num_predict": 256},
            },
        )
        response.raise_for_status()
        return str(response.json().get("response") or "")


PROVIDER_NAMES = {
    "openai": OpenAIProvider,
    "groq": GroqProvider,
    "ollama": OllamaProvider,
}


def build_providers(settings: Settings) -> List[CopyProvider]:
    """
    Instantiate the copy chain in fixed priority order: OpenAI, Groq, then the
    local Ollama model. AI_PROVIDER pins the chain to one entry (or to none
    with "demo"); it never lifts the hosted-deployment ban on the local model.
    """
    override = settings.provider_override
    wanted = set(PROVIDER_NAMES) if not override else {override}

    chain: List[CopyProvider] = []
    if "openai" in wanted and settings.has_openai:
        chain.append(OpenAIProvider.from_settings(settings))
    if "groq" in wanted and settings.has_groq:
        chain.append(GroqProvider.from_settings(settings))
    if "ollama" in wanted and settings.local_allowed:
        chain.append(OllamaProvider.from_settings(settings))

    if override and override not in PROVIDER_NAMES:
        logger.info("AI_PROVIDER=%s; serving deterministic copy only", override)
    return chain
