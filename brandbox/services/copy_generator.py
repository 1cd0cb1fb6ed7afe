import logging
from typing import List, Optional, Sequence

from ..config import Settings
from ..schemas import Brief, DebugResponse, DiagResponse, GenerateResponse, ProviderAttempt
from .composer import compose
from .images import (
    OpenAIPosterGenerator,
    PexelsImageSearch,
    fallback_image_urls,
    placeholder_data_url,
    resolve_images,
)
from .normalizer import normalize
from .providers import CopyProvider, build_providers
from .quality import enforce_copy, is_acceptable

logger = logging.getLogger(__name__)

MSG_HOSTED_NO_PROVIDERS = (
    "No cloud key configured and the local model is not reachable in production. "
    "Serving deterministic copy."
)
MSG_NO_PROVIDERS = "AI not available. Serving deterministic copy."
MSG_PROVIDERS_FAILED = "AI output unavailable or off-brief. Serving deterministic copy."
MSG_NO_IMAGES = "Image provider unavailable; using a placeholder poster."


class CopyGenerator:
    """Builds copy and poster imagery for a brief, falling back tier by tier."""

    def __init__(
        self,
        settings: Settings,
        providers: Optional[Sequence[CopyProvider]] = None,
        image_search: Optional[PexelsImageSearch] = None,
        poster_generator: Optional[OpenAIPosterGenerator] = None,
    ):
        self.settings = settings
        self.providers: List[CopyProvider] = list(providers) if providers is not None else []
        self.image_search = image_search
        self.poster_generator = poster_generator

    @classmethod
    def from_settings(cls, settings: Settings) -> "CopyGenerator":
        return cls(
            settings,
            providers=build_providers(settings),
            image_search=PexelsImageSearch.from_settings(settings),
            poster_generator=OpenAIPosterGenerator.from_settings(settings),
        )

    def generate(self, brief: Brief) -> GenerateResponse:
        product = brief.product.strip()
        if not product:
            raise ValueError("Missing product")

        baseline = compose(brief)
        provider_id = "fallback"
        model: Optional[str] = None
        copy = baseline
        raw: Optional[str] = None

        for provider in self.providers:
            reply = provider.try_generate(brief)
            if reply is None:
                logger.info("%s produced no content; trying next tier", provider.provider_id)
                continue
            candidate = enforce_copy(normalize(reply.text, product), product, brief.category)
            if not is_acceptable(candidate, product, brief.category, brief.key_benefit):
                logger.info("%s output rejected by quality gate", provider.provider_id)
                continue
            provider_id, model, copy, raw = provider.provider_id, reply.model, candidate, reply.text
            break

        demo = provider_id == "fallback"
        messages: List[str] = []
        if demo:
            logger.info("Serving deterministic copy for %r", product)
            messages.append(self._fallback_message())

        photo_urls: List[str] = []
        image_data_url: Optional[str] = None
        fallback_images: List[str] = []
        if brief.include_image:
            if provider_id == "primary-cloud" and self.poster_generator is not None:
                image_data_url = self.poster_generator.generate(brief)
            if image_data_url is None:
                photo_urls = resolve_images(brief, self.image_search)
            if image_data_url is None and not photo_urls:
                image_data_url = placeholder_data_url(product)
                messages.append(MSG_NO_IMAGES)
            fallback_images = fallback_image_urls(product)

        return GenerateResponse(
            provider=provider_id,
            model=model,
            demo=demo,
            copy_=copy,
            photo_urls=photo_urls,
            photo_url=photo_urls[0] if photo_urls else None,
            image_data_url=image_data_url,
            fallback_images=fallback_images,
            message=" ".join(messages) or None,
            raw=raw,
        )

    def _fallback_message(self) -> str:
        if self.providers:
            return MSG_PROVIDERS_FAILED
        if self.settings.hosted:
            return MSG_HOSTED_NO_PROVIDERS
        return MSG_NO_PROVIDERS

    def diagnostics(self) -> DiagResponse:
        chain = [p.provider_id for p in self.providers]
        models = {p.provider_id: p.models for p in self.providers}
        return DiagResponse(
            hosted=self.settings.hosted,
            provider_override=self.settings.provider_override or "(unset)",
            has_openai=self.settings.has_openai,
            has_groq=self.settings.has_groq,
            pexels_set=self.image_search is not None,
            providers=chain,
            will_use=chain[0] if chain else "fallback",
            models=models,
        )

    def debug(self, brief: Brief) -> DebugResponse:
        """Run every configured provider without short-circuiting and report what each returned."""
        product = brief.product.strip()
        if not product:
            raise ValueError("Missing product")

        attempts: List[ProviderAttempt] = []
        for provider in self.providers:
            reply = provider.try_generate(brief)
            if reply is None:
                attempts.append(ProviderAttempt(provider=provider.provider_id, ok=False, accepted=False))
                continue
            candidate = enforce_copy(normalize(reply.text, product), product, brief.category)
            attempts.append(
                ProviderAttempt(
                    provider=provider.provider_id,
                    ok=True,
                    accepted=is_acceptable(candidate, product, brief.category, brief.key_benefit),
                    raw=reply.text,
                    copy_=candidate,
                )
            )
        return DebugResponse(baseline=compose(brief), attempts=attempts)
