import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from shared.schemas.articles import NormalizedArticle

FALLBACK_CATEGORY = ("technology", "Technology")


@dataclass(frozen=True)
class CategoryRule:
    slug: str
    name: str
    patterns: Tuple[Pattern, ...]


def _rule(slug: str, name: str, *patterns: str) -> CategoryRule:
    return CategoryRule(slug, name, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


# First match wins, so broader buckets sit at the bottom.
CATEGORY_RULES = (
    _rule("ai", "AI", r"(\b|[^a-z])ai(\b|[^a-z])", r"artificial intelligence", r"machine learning",
          r"\bllm\b", r"chatgpt", r"openai", r"generative ai"),
    _rule("smartphones", "Smartphones", r"smartphone", r"\biphone\b", r"\bgalaxy\b", r"\bpixel\b",
          r"\boneplus\b", r"\bphone\b"),
    _rule("laptops", "Laptops", r"laptop", r"notebook", r"macbook", r"chromebook", r"surface (laptop|book)"),
    _rule("tablets", "Tablets", r"tablet", r"\bipad\b", r"galaxy tab", r"surface pro"),
    _rule("wearables", "Wearables", r"wearable", r"smartwatch", r"fitness tracker", r"fitbit",
          r"apple watch", r"garmin", r"\bsmart ring\b"),
    _rule("smart-home", "Smart Home", r"smart home", r"homekit", r"matter\b", r"alexa\b", r"google home",
          r"\bnest\b", r"\bring\b", r"homepod"),
    _rule("audio", "Audio", r"audio\b", r"soundbar", r"speaker", r"hi-?fi", r"spotify", r"podcast",
          r"dolby", r"sonos"),
    _rule("headphones", "Headphones", r"headphone", r"headset", r"earbud", r"earpod", r"airpod",
          r"\bbuds\b", r"over-ear"),
    _rule("gaming", "Gaming", r"gaming\b", r"\bgame\b", r"xbox", r"playstation", r"\bps\d", r"nintendo",
          r"switch\b", r"steam deck", r"esports"),
    _rule("cameras", "Cameras", r"camera", r"mirrorless", r"dslr", r"lens\b", r"canon\b", r"nikon\b",
          r"sony alpha", r"gopro"),
    _rule("drones", "Drones", r"drone", r"quadcopter", r"\buav\b", r"\bdji\b", r"mavic"),
    _rule("apps", "Apps", r"\bapp\b", r"\bapps\b", r"app store", r"play store"),
    _rule("mobile", "Mobile", r"\bmobile\b", r"\b5g\b", r"carrier", r"verizon", r"t-mobile", r"at&t"),
    _rule("startups", "Startups", r"startup", r"seed round", r"series [abc]", r"funding", r"venture", r"\bvc\b"),
    _rule("reviews", "Reviews", r"review\b", r"hands[- ]on", r"first look"),
    _rule("gadgets", "Gadgets", r"gadget", r"device\b", r"hardware", r"gizmo"),
)


def country_category(country: str) -> Tuple[str, str]:
    region = (country or "").lower()
    if not region:
        return FALLBACK_CATEGORY
    return f"news-{region}", f"News ({region.upper()})"


def detect_category(article: NormalizedArticle, country: str) -> Tuple[str, str]:
    """(slug, name) of the first keyword rule matching the article, else the country bucket."""
    haystack = " ".join(
        [article.title, article.summary, article.content_raw, article.provider, article.source_name]
    ).lower()
    for rule in CATEGORY_RULES:
        if any(pattern.search(haystack) for pattern in rule.patterns):
            return rule.slug, rule.name
    return country_category(country)
