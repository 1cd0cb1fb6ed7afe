from ..schemas import Copy
from .composer import (
    TAGLINE_MAX_WORDS,
    category_hashtag,
    ensure_product_mention,
    mentions,
    product_hashtag,
    unique_hashtags,
    word_count,
)
from .normalizer import default_copy

MIN_TAGLINE_WORDS = 2
MIN_CAPTION_WORDS = 4


def enforce_copy(copy: Copy, product: str, category: str) -> Copy:
    """Rescue a provider candidate before judging it. Applying it twice changes nothing."""
    tagline = ensure_product_mention(copy.tagline, product, TAGLINE_MAX_WORDS)
    hashtags = unique_hashtags([product_hashtag(product), category_hashtag(category), *copy.hashtags])
    return copy.model_copy(update={"tagline": tagline, "hashtags": hashtags})


def is_canned(copy: Copy, product: str) -> bool:
    canned = default_copy(product)
    opener = canned.caption.split("!")[0] + "!"
    return (
        copy.tagline.strip().lower() == canned.tagline.lower()
        or copy.caption.strip().lower().startswith(opener.lower())
    )


def is_acceptable(copy: Copy, product: str, category: str, benefit: str) -> bool:
    headline = f"{copy.tagline}\n{copy.caption}"

    if not mentions(headline, product):
        return False

    category = (category or "").strip()
    benefit = (benefit or "").strip()
    if category and benefit and not (mentions(headline, category) or mentions(headline, benefit)):
        return False

    if word_count(copy.tagline) < MIN_TAGLINE_WORDS or word_count(copy.caption) < MIN_CAPTION_WORDS:
        return False

    return not is_canned(copy, product)
