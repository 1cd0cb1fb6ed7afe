"""Deterministic copy composer.

Produces baseline marketing copy from a brief with no I/O. All variety comes
from a 32-bit FNV-1a seed over the brief's text fields, so the same brief
always yields the same tagline, caption, description and hashtags.
"""

import re
from typing import Dict, Iterable, List, Sequence, Tuple

from ..schemas import Brief, Copy

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

TAGLINE_MAX_WORDS = 8
CAPTION_MAX_WORDS = 24
PRODUCT_MAX_WORDS = 5
MAX_HASHTAGS = 5

FILLER_HASHTAGS = ("#new", "#musthave")

# Checked in order; the first tag with a keyword inside the category wins.
# Desserts sit ahead of skincare so "ice cream" is not read as a cream.
CATEGORY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("beverage", ("beverage", "drink", "coffee", "brew", "espresso", "latte", "chai", "matcha",
                  "juice", "soda", "smoothie", "kombucha", "beer", "wine")),
    ("food", ("ice cream", "gelato", "dessert", "frozen yogurt")),
    ("skincare", ("skin", "serum", "cream", "lotion", "moistur", "cleanser", "beauty", "cosmetic", "spf")),
    ("apparel", ("apparel", "cloth", "shirt", "hoodie", "dress", "jacket", "sneaker", "shoe",
                 "fashion", "wear")),
    ("gadget", ("gadget", "tech", "phone", "headphone", "earbud", "speaker", "device", "electronic",
                "charger", "watch")),
    ("pet", ("pet", "dog", "cat", "puppy", "kitten", "kibble")),
    ("home", ("home", "decor", "candle", "furniture", "kitchen", "lamp", "pillow", "bedding")),
    ("food", ("food", "snack", "cookie", "chocolate", "granola", "sauce", "bakery", "cereal", "meal")),
)

# Too short to match inside other words ("education", "carpet").
WHOLE_WORD_KEYWORDS = frozenset(("pet", "cat"))

TONE_SYNONYMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("playful", ("playful", "fun", "witty", "cheeky", "quirky", "silly")),
    ("luxury", ("luxury", "lux", "premium", "elegant", "upscale", "sophisticated")),
    ("bold", ("bold", "energetic", "confident", "edgy", "loud", "daring")),
    ("calm", ("calm", "relax", "soothing", "minimal", "serene", "gentle")),
    ("friendly", ("friendly", "warm", "casual", "approachable")),
)

TONE_WORDS: Dict[str, Tuple[str, ...]] = {
    "friendly": ("friendly", "easygoing", "welcoming", "feel-good"),
    "playful": ("playful", "fun", "cheeky", "bright"),
    "luxury": ("luxurious", "refined", "elegant", "indulgent"),
    "bold": ("bold", "fearless", "striking", "powerful"),
    "calm": ("calm", "soothing", "gentle", "serene"),
}

VERBS = ("Discover", "Try", "Enjoy", "Experience", "Grab", "Unbox")

# Skipped when deriving a hashtag from the benefit phrase.
BENEFIT_STOPWORDS = frozenset(
    ("a", "an", "the", "and", "or", "in", "of", "on", "with", "for", "to", "your", "you", "every", "all",
     "more", "less", "that", "it", "is", "just", "little", "something")
)

CLOSERS = (
    "Made for everyday moments.",
    "Your new favorite starts here.",
    "Treat yourself today.",
    "Small change, big difference.",
    "Once you try it, you'll get it.",
)

# category -> (category phrases, benefit fallbacks, use cases)
CATEGORY_PROFILES: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...]]] = {
    "beverage": (
        ("drink", "sip", "pour"),
        ("flavor in every sip", "a smooth, easy pick-me-up", "a refreshing little ritual"),
        ("slow mornings", "afternoon breaks", "busy workdays", "weekend hangs"),
    ),
    "skincare": (
        ("skincare pick", "daily ritual", "routine essential"),
        ("a simple daily routine", "skin that feels cared for", "a little self-care"),
        ("morning routines", "wind-down evenings", "everyday self-care"),
    ),
    "apparel": (
        ("wardrobe staple", "everyday layer", "go-to fit"),
        ("comfort you can wear all day", "easy everyday style", "a fit that just works"),
        ("city days", "weekend plans", "everyday outfits"),
    ),
    "gadget": (
        ("gadget", "tech upgrade", "everyday device"),
        ("tech that keeps up with you", "less hassle, more doing", "a smarter everyday setup"),
        ("work-from-anywhere days", "daily commutes", "busy schedules"),
    ),
    "pet": (
        ("pet essential", "treat", "companion pick"),
        ("happy tails all day", "something your pet will love", "more good moments together"),
        ("daily walks", "cozy nights in", "mealtime"),
    ),
    "home": (
        ("home essential", "cozy touch", "home upgrade"),
        ("a space that feels like you", "everyday comfort at home", "an easy home refresh"),
        ("quiet evenings", "lazy Sundays", "hosting friends"),
    ),
    "food": (
        ("snack", "bite", "treat"),
        ("flavor worth sharing", "a tasty everyday treat", "a bite that hits the spot"),
        ("snack breaks", "road trips", "movie nights"),
    ),
    "other": (
        ("find", "essential", "pick"),
        ("something made with care", "an easy everyday upgrade", "a little extra joy"),
        ("everyday life", "busy days", "the moments that matter"),
    ),
}

# Fixed per-slot offsets into the seed.
SALT_TONE_1 = 3
SALT_TONE_2 = 5
SALT_VERB = 11
SALT_CLOSER = 13
SALT_USE_CASE = 17
SALT_CATEGORY_PHRASE = 19
SALT_BENEFIT = 23

# (tagline, caption, description) templates.
TEMPLATES: Tuple[Tuple[str, str, str], ...] = (
    (
        "{verb} {product}",
        "{product} brings {tone1} {phrase} energy to {use_case}, with {benefit}.",
        "{product} is {a_tone1}, {tone2} {phrase} for {audience}. Expect {benefit}. {closer}",
    ),
    (
        "{product}, {tone1} and {tone2}",
        "Say yes to {product}, the {tone1} {phrase} made for {use_case} and {benefit}.",
        "This is {product}: {benefit}, wrapped in {a_tone2} {phrase}. Built for {audience} and {use_case}. {closer}",
    ),
    (
        "{tone1_cap} {phrase}, meet {product}",
        "{verb} {product} for {use_case}: {a_tone2} {phrase} with {benefit}.",
        "{product} turns {use_case} into something {tone1}. It is all about {benefit}. {closer}",
    ),
    (
        "{product}: {benefit_short}",
        "{product} is your {tone1} {phrase} for {use_case}, because {audience} deserve {benefit}.",
        "Looking for {a_tone2} {phrase}? {product} delivers {benefit} for {audience}. {closer}",
    ),
)

_SLUG_RE = re.compile(r"[^\w]+", re.UNICODE)


def fnv1a_32(text: str) -> int:
    """FNV-1a over the UTF-8 bytes of ``text``."""
    h = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


def brief_seed(brief: Brief) -> int:
    parts = [brief.product, brief.category, brief.key_benefit, brief.audience, brief.tone, brief.platform]
    return fnv1a_32("|".join((p or "").strip() for p in parts))


def _has_keyword(text: str, keyword: str) -> bool:
    if keyword in WHOLE_WORD_KEYWORDS:
        return re.search(rf"\b{keyword}s?\b", text) is not None
    return keyword in text


def normalize_category(category: str) -> str:
    text = (category or "").strip().lower()
    if not text:
        return "other"
    for tag, keywords in CATEGORY_KEYWORDS:
        if any(_has_keyword(text, k) for k in keywords):
            return tag
    return "other"


def normalize_tone(tone: str) -> str:
    text = (tone or "").strip().lower()
    if not text:
        return "friendly"
    for name, synonyms in TONE_SYNONYMS:
        if any(s in text for s in synonyms):
            return name
    return "friendly"


def pick(options: Sequence[str], seed: int, salt: int) -> str:
    return options[(seed + salt) % len(options)]


def clamp_words(text: str, max_words: int) -> str:
    words = text.split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]).rstrip(",;:-")


def word_count(text: str) -> int:
    return len((text or "").split())


def product_prefix(product: str) -> str:
    return clamp_words(product.strip(), PRODUCT_MAX_WORDS)


def mentions(text: str, needle: str) -> bool:
    needle = (needle or "").strip().lower()
    return bool(needle) and needle in (text or "").lower()


def normalize_hashtag(token: str) -> str:
    """'#Cold Brew!' -> '#coldbrew'. Returns '' when nothing usable is left."""
    body = _SLUG_RE.sub("", (token or "").strip().lstrip("#").lower())
    return f"#{body}" if body else ""


def unique_hashtags(tags: Iterable[str], limit: int = MAX_HASHTAGS) -> List[str]:
    out: List[str] = []
    for tag in tags:
        tag = normalize_hashtag(tag)
        if tag and tag not in out:
            out.append(tag)
        if len(out) >= limit:
            break
    return out


def product_hashtag(product: str) -> str:
    words = (product or "").split()
    return normalize_hashtag(words[0]) if words else ""


def category_hashtag(category: str) -> str:
    tag = normalize_category(category)
    if tag != "other":
        return f"#{tag}"
    return normalize_hashtag(category)


def benefit_hashtag(benefit: str) -> str:
    words = [w for w in re.findall(r"\w+", (benefit or "").lower()) if w not in BENEFIT_STOPWORDS]
    return normalize_hashtag("".join(words[:2]))


def with_article(word: str) -> str:
    return f"{'an' if word[:1].lower() in 'aeiou' else 'a'} {word}"


def ensure_product_mention(text: str, product: str, max_words: int) -> str:
    """Prepend the product prefix when ``text`` mentions neither the product nor its prefix."""
    prefix = product_prefix(product)
    if mentions(text, product) or mentions(text, prefix):
        return text
    return clamp_words(f"{prefix}: {text}", max_words)


def _ensure_sentence(text: str) -> str:
    text = text.strip()
    if text and text[-1] not in ".!?":
        text += "."
    return text


def compose(brief: Brief) -> Copy:
    seed = brief_seed(brief)
    product = product_prefix(brief.product) or "Your product"
    category = normalize_category(brief.category)
    tone = normalize_tone(brief.tone)

    phrases, benefit_fallbacks, use_cases = CATEGORY_PROFILES[category]
    tone_words = TONE_WORDS[tone]

    tone1_idx = (seed + SALT_TONE_1) % len(tone_words)
    tone2_idx = (seed + SALT_TONE_2) % len(tone_words)
    if tone2_idx == tone1_idx:
        tone2_idx = (tone2_idx + 1) % len(tone_words)
    tone1 = tone_words[tone1_idx]
    tone2 = tone_words[tone2_idx]

    benefit = (brief.key_benefit or "").strip().rstrip(".") or pick(benefit_fallbacks, seed, SALT_BENEFIT)
    slots = {
        "product": product,
        "tone1": tone1,
        "tone1_cap": tone1[:1].upper() + tone1[1:],
        "tone2": tone2,
        "a_tone1": with_article(tone1),
        "a_tone2": with_article(tone2),
        "verb": pick(VERBS, seed, SALT_VERB),
        "closer": pick(CLOSERS, seed, SALT_CLOSER),
        "use_case": pick(use_cases, seed, SALT_USE_CASE),
        "phrase": pick(phrases, seed, SALT_CATEGORY_PHRASE),
        "benefit": benefit,
        "benefit_short": clamp_words(benefit, 3),
        "audience": (brief.audience or "").strip() or "everyday people",
    }

    tagline_tpl, caption_tpl, description_tpl = TEMPLATES[seed % len(TEMPLATES)]
    tagline = clamp_words(tagline_tpl.format(**slots), TAGLINE_MAX_WORDS)
    caption = _ensure_sentence(clamp_words(caption_tpl.format(**slots), CAPTION_MAX_WORDS))
    description = description_tpl.format(**slots)

    tagline = ensure_product_mention(tagline, brief.product, TAGLINE_MAX_WORDS)
    caption = ensure_product_mention(caption, brief.product, CAPTION_MAX_WORDS)

    hashtags = unique_hashtags(
        [
            product_hashtag(brief.product),
            category_hashtag(brief.category),
            benefit_hashtag(benefit),
            *FILLER_HASHTAGS,
        ]
    )
    return Copy(tagline=tagline, caption=caption, short_description=description, hashtags=hashtags)
