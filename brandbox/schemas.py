from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ProviderId = Literal["primary-cloud", "secondary-cloud", "local", "fallback"]


class Brief(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product: str = Field("", description="Product name; required and must be non-empty.")
    category: str = Field("", description="Free-text category, e.g. 'Beverage' or 'dog food'.")
    key_benefit: str = Field("", alias="keyBenefit", description="Optional headline benefit to ground the copy.")
    audience: str = ""
    tone: str = Field("", description="friendly, playful, luxury, bold or calm; anything else reads as friendly.")
    platform: str = ""
    image_style: str = Field("", alias="imageStyle")
    color_hint: str = Field("", alias="colorHint")
    include_image: bool = Field(True, alias="includeImage")
    image_query: str = Field("", alias="imageQuery", description="Overrides the stock-photo search terms.")


class Copy(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tagline: str
    caption: str
    short_description: str = Field(..., alias="shortDescription")
    hashtags: List[str]


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: ProviderId
    model: Optional[str] = None
    demo: bool
    copy_: Copy = Field(..., alias="copy")
    photo_urls: List[str] = Field(default_factory=list, alias="photoUrls")
    photo_url: Optional[str] = Field(None, alias="photoUrl")
    image_data_url: Optional[str] = Field(None, alias="imageDataUrl")
    fallback_images: List[str] = Field(default_factory=list, alias="fallbackImages")
    message: Optional[str] = None
    raw: Optional[str] = None


class DiagResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hosted: bool
    provider_override: str = Field(..., alias="providerOverride")
    has_openai: bool = Field(..., alias="hasOpenAI")
    has_groq: bool = Field(..., alias="hasGroq")
    pexels_set: bool = Field(..., alias="pexelsSet")
    providers: List[ProviderId]
    will_use: ProviderId = Field(..., alias="willUse")
    models: dict


class ProviderAttempt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    provider: ProviderId
    ok: bool
    accepted: bool
    raw: Optional[str] = None
    copy_: Optional[Copy] = Field(None, alias="copy")


class DebugResponse(BaseModel):
    baseline: Copy
    attempts: List[ProviderAttempt]
