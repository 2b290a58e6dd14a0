from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class NormalizedArticle(BaseModel):
    id: str = Field(..., description="Provider-native identifier, usually the canonical URL")
    title: str = Field("", description="Article headline")
    summary: str = Field("", description="Short description from the provider")
    url: str = Field("", description="Canonical URL")
    image: Optional[str] = Field(None, description="Lead image URL")
    published_at: Optional[str] = Field(None, description="Publish timestamp as sent by the provider")
    source_name: str = Field(..., description="Publisher name, or a provider default")
    source_country: Optional[str] = Field(None, description="Two-letter lowercase country code")
    provider: str = Field(..., description="Provider tag, e.g. 'newsdata'")
    content_raw: str = Field("", description="Raw body text from the provider")

    # Set by the rewriter
    slug: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    content: Optional[str] = None
    takeaways: List[str] = Field(default_factory=list)


class NewsRouterResponse(BaseModel):
    success: Literal[True] = True
    country: str
    count: int
    items: List[NormalizedArticle]
    generated_at: str = Field(..., description="ISO-8601 time the payload was built")


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: str
