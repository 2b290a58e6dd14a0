from services.news_router.app.rewriter import format_date, rewrite_article, to_slug


def test_slug_is_stable_and_trimmed():
    first = to_slug("Apple's New AI Chip!!")
    assert first == "apple-s-new-ai-chip"
    assert all(to_slug("Apple's New AI Chip!!") == first for _ in range(5))


def test_slug_truncates_without_trailing_hyphen():
    slug = to_slug("word " * 40)
    assert len(slug) <= 80
    assert not slug.endswith("-")
    assert not slug.startswith("-")


def test_format_date_formats_iso_and_rfc_dates():
    assert format_date("2024-03-05T22:10:00Z") == "2024-03-05"
    assert format_date("Tue, 05 Mar 2024 22:10:00 +0000") == "2024-03-05"
    assert format_date("2024-03-05 22:10:00") == "2024-03-05"


def test_format_date_returns_raw_value_when_unparseable():
    assert format_date("yesterday-ish") == "yesterday-ish"


def test_rewrite_produces_seo_fields_and_body(make_article):
    out = rewrite_article(make_article(), brand="TechBeetle")

    assert out.slug == "apple-unveils-a-new-chip"
    assert out.seo_title == "Apple unveils a new chip | TechBeetle Brief"
    assert out.seo_description == "Apple announced a faster chip for its laptops."
    assert out.takeaways == ["Source: Example Times", "Published 2024-01-01", "Region: US"]

    sections = out.content.split("\n\n")
    assert sections[0] == "Apple announced a faster chip for its laptops on Monday."
    assert sections[1] == "Apple announced a faster chip for its laptops."
    assert sections[2] == "Originally reported by Example Times (US); this is a brief for TechBeetle readers."
    assert sections[3].startswith("Key takeaways:\n- Source: Example Times")


def test_rewrite_is_total_for_empty_summary(make_article):
    out = rewrite_article(make_article(summary="", content_raw="", published_at=None, source_country=None))

    assert out.slug
    assert out.seo_description == "Brief update for TechBeetle readers."
    assert out.content
    assert "Originally reported by Example Times; this is a brief" in out.content
    assert out.takeaways == ["Source: Example Times", "Recent"]


def test_rewrite_falls_back_to_hashed_slug_for_symbol_only_title(make_article):
    out = rewrite_article(make_article(title="!!!", provider="gnews"))
    assert out.slug.startswith("gnews-")
    assert len(out.slug) == len("gnews-") + 12


def test_rewrite_is_deterministic(make_article):
    article = make_article(summary="  Lots   of\n whitespace  ")
    assert rewrite_article(article) == rewrite_article(article)
    assert rewrite_article(article).summary == "Lots of whitespace"


def test_rewrite_does_not_repeat_summary_equal_to_raw_content(make_article):
    out = rewrite_article(make_article(summary="Same text.", content_raw="Same text."))
    assert out.content.count("Same text.") == 1


def test_seo_description_is_capped(make_article):
    out = rewrite_article(make_article(summary="x" * 400))
    assert len(out.seo_description) == 150


def test_rewrite_survives_out_of_range_dates(make_article):
    out = rewrite_article(make_article(published_at="0001-01-01T00:00:00+05:00"))

    assert format_date("0001-01-01T00:00:00+05:00") == "0001-01-01T00:00:00+05:00"
    assert "Published 0001-01-01T00:00:00+05:00" in out.takeaways
    assert out.content
