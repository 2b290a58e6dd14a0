import json
from types import SimpleNamespace

import pytest

from services.news_router.app.explainer import AIExplainer
from services.news_router.app.rewriter import rewrite_article
from shared.config.settings import OpenAISettings


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(content=None, error=None):
    completions = FakeCompletions(content, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


@pytest.fixture
def openai_settings():
    return OpenAISettings(OPENAI_API_KEY="", OPENAI_MODEL="gpt-4.1-mini")


def test_without_key_explainer_is_off(openai_settings):
    assert AIExplainer(openai_settings).configured is False


@pytest.mark.asyncio
async def test_ai_fields_replace_template_but_slug_stays(openai_settings, make_article):
    body = "An explainer paragraph. " * 30
    client, completions = fake_client(json.dumps({
        "summary": "Apple has a faster chip.",
        "body": body,
        "takeaways": ["Faster chip", "Ships in laptops"],
        "seo_title": "Apple's faster chip explained",
        "seo_description": "What Apple's new chip means.",
    }))
    article = rewrite_article(make_article())

    out = await AIExplainer(openai_settings, client=client).explain(article)

    assert out.slug == article.slug
    assert out.title == article.title
    assert out.content == body.strip()
    assert out.summary == "Apple has a faster chip."
    assert out.takeaways == ["Faster chip", "Ships in laptops"]
    assert out.seo_title == "Apple's faster chip explained"
    assert out.seo_description == "What Apple's new chip means."
    request = completions.requests[0]
    assert request["model"] == "gpt-4.1-mini"
    assert request["response_format"] == {"type": "json_object"}


@pytest.mark.asyncio
async def test_short_body_is_padded_with_source_text(openai_settings, make_article):
    client, _ = fake_client(json.dumps({"body": "Short.", "key_takeaways": ["One"]}))
    article = rewrite_article(make_article())

    out = await AIExplainer(openai_settings, client=client).explain(article)

    assert out.content == f"Short.\n\n{article.content_raw}"
    assert out.takeaways == ["One"]


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["not json", "[1, 2]", json.dumps({"body": "", "summary": ""}), None])
async def test_unusable_response_keeps_template(openai_settings, make_article, content):
    client, _ = fake_client(content)
    article = rewrite_article(make_article(summary="", content_raw=""))

    assert await AIExplainer(openai_settings, client=client).explain(article) == article


@pytest.mark.asyncio
async def test_api_error_keeps_template(openai_settings, make_article):
    client, _ = fake_client(error=RuntimeError("rate limited"))
    article = rewrite_article(make_article())

    assert await AIExplainer(openai_settings, client=client).explain(article) == article
