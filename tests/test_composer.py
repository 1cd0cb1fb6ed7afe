from __future__ import annotations

import pytest

from brandbox.schemas import Brief
from brandbox.services.composer import (
    CAPTION_MAX_WORDS,
    TAGLINE_MAX_WORDS,
    clamp_words,
    compose,
    fnv1a_32,
    normalize_category,
    normalize_hashtag,
    normalize_tone,
    product_prefix,
    word_count,
)

BRIEFS = [
    Brief(product="Pumpkin Spice Cold Brew", category="Beverage", tone="playful"),
    Brief(product="Widget", category="Gadget"),
    Brief(product="Glow Serum", category="skincare", key_benefit="a dewy finish", tone="luxury"),
    Brief(product="Trail Runner Hoodie Pro Max Ultra", category="apparel", tone="bold", platform="TikTok"),
    Brief(product="Crunchy Kibble", category="dog food", audience="busy pet parents", tone="calm"),
    Brief(product="Lavender Candle", category="Home decor", tone="sarcastic"),
    Brief(product="Sea Salt Chips", category="snacks", key_benefit="zero sugar"),
    Brief(product="Mystery Box", category=""),
]


def test_fnv1a_known_vectors():
    assert fnv1a_32("") == 2166136261
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


@pytest.mark.parametrize(
    "category,expected",
    [
        ("Coffee beans", "beverage"),
        ("cold BREW", "beverage"),
        ("Skincare serum", "skincare"),
        ("Hoodie", "apparel"),
        ("Headphones", "gadget"),
        ("dog food", "pet"),
        ("Scented candle", "home"),
        ("Granola", "food"),
        ("Ice cream", "food"),
        ("Frozen dessert", "food"),
        ("Cat toys", "pet"),
        ("pets", "pet"),
        ("Education", "other"),
        ("vacation rentals", "other"),
        ("Widgets", "other"),
        ("", "other"),
    ],
)
def test_normalize_category(category, expected):
    assert normalize_category(category) == expected


@pytest.mark.parametrize(
    "tone,expected",
    [("Playful", "playful"), ("premium", "luxury"), ("energetic", "bold"), ("Relaxed", "calm"), ("", "friendly"), ("sarcastic", "friendly")],
)
def test_normalize_tone(tone, expected):
    assert normalize_tone(tone) == expected


def test_clamp_words_never_cuts_mid_word():
    assert clamp_words("one two three four", 2) == "one two"
    assert clamp_words("  spaced   out  ", 5) == "spaced out"
    assert clamp_words("keep, this, comma", 2) == "keep, this"


def test_normalize_hashtag():
    assert normalize_hashtag("##Cold Brew!") == "#coldbrew"
    assert normalize_hashtag("#") == ""


@pytest.mark.parametrize("brief", BRIEFS)
def test_compose_is_deterministic(brief):
    assert compose(brief) == compose(brief.model_copy())


@pytest.mark.parametrize("brief", BRIEFS)
def test_compose_invariants(brief):
    copy = compose(brief)

    assert product_prefix(brief.product).lower() in copy.tagline.lower()
    assert product_prefix(brief.product).lower() in copy.caption.lower()
    assert 1 <= word_count(copy.tagline) <= TAGLINE_MAX_WORDS
    assert word_count(copy.caption) <= CAPTION_MAX_WORDS

    assert 1 <= len(copy.hashtags) <= 5
    assert len(set(copy.hashtags)) == len(copy.hashtags)
    for tag in copy.hashtags:
        assert tag.startswith("#") and not tag.startswith("##")
        assert tag == tag.lower()


def test_pumpkin_spice_scenario():
    copy = compose(Brief(product="Pumpkin Spice Cold Brew", category="Beverage", tone="playful"))
    assert "pumpkin spice cold brew" in copy.tagline.lower()
    assert "#beverage" in copy.hashtags
    assert copy.hashtags[0] == "#pumpkin"


def test_key_benefit_flows_into_description():
    copy = compose(Brief(product="Sea Salt Chips", category="snacks", key_benefit="zero sugar"))
    assert "zero sugar" in copy.short_description
    assert "#zerosugar" in copy.hashtags


def test_description_has_at_most_three_sentences():
    for brief in BRIEFS:
        text = compose(brief).short_description
        terminators = sum(text.count(c) for c in ".!?")
        assert terminators <= 3


def test_different_briefs_vary():
    taglines = {compose(Brief(product=f"Widget {n}", category="gadget")).tagline for n in range(12)}
    assert len(taglines) > 1
