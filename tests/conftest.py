from datetime import datetime, timezone

import pytest

from eventfusion.core.models.article import RawArticle

# Friday
PUBLISHED = datetime(2025, 6, 13, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def published():
    return PUBLISHED


@pytest.fixture
def make_article():
    """文章工厂：只需给出关心的字段"""
    def _make(title="", description="", body="", source="Reuters", published_at=PUBLISHED, url=None):
        return RawArticle(
            title=title,
            description=description,
            body=body,
            source_name=source,
            published_at=published_at,
            url=url if url is not None else f"https://news.example/{source}/{title}",
        )
    return _make
