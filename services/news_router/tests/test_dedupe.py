from services.news_router.app.dedupe import dedupe_articles, dedupe_key, dedupe_slugs


def test_duplicate_title_source_and_time_collapse(make_article):
    articles = [
        make_article(title="A", source_name="X", published_at="2024-01-01T10:00:00Z", provider="newsdata"),
        make_article(title="a", source_name="X", published_at="2024-01-01T10:00:00Z", provider="gnews"),
        make_article(title="B", source_name="X", published_at="2024-01-01T10:00:00Z"),
    ]

    unique = dedupe_articles(articles)

    assert [a.title for a in unique] == ["A", "B"]
    assert unique[0].provider == "newsdata"


def test_dedupe_key_shape(make_article):
    article = make_article(title="Big News", source_name="Wire", published_at=None)
    assert dedupe_key(article) == "big news|Wire|"


def test_whitespace_or_time_differences_are_distinct(make_article):
    articles = [
        make_article(title="Big News"),
        make_article(title="Big  News"),
        make_article(title="Big News", published_at="2024-01-01T10:00:01Z"),
        make_article(title="Big News", source_name="Other Wire"),
    ]
    assert len(dedupe_articles(articles)) == 4


def test_dedupe_empty():
    assert dedupe_articles([]) == []


def test_same_title_and_source_on_another_day_is_kept(make_article):
    articles = [
        make_article(title="A", source_name="X", published_at="2024-01-01"),
        make_article(title="A", source_name="X", published_at="2024-01-01"),
        make_article(title="A", source_name="X", published_at="2024-01-02"),
    ]

    unique = dedupe_articles(articles)

    assert len(unique) == 2
    assert [a.published_at for a in unique] == ["2024-01-01", "2024-01-02"]


def test_dedupe_slugs_keeps_first_story_per_slug(make_article):
    articles = [
        make_article(title="Big News", source_name="A", slug="big-news"),
        make_article(title="Big News", source_name="B", slug="big-news"),
        make_article(title="Other", source_name="B", slug="other"),
    ]

    unique = dedupe_slugs(articles)

    assert [(a.slug, a.source_name) for a in unique] == [("big-news", "A"), ("other", "B")]
