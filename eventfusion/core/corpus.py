"""
Article Corpus: 验证阶段使用的近期文章滚动缓冲区（内存版）。
"""
import logging
import threading
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config.settings import settings
from .models.article import RawArticle

logger = logging.getLogger(__name__)


def article_key(article: RawArticle) -> Tuple[str, ...]:
    """去重键：优先 URL，没有 URL 时使用 (来源, 标题)"""
    if article.url:
        return (article.url,)
    return (article.source_name, article.title)


def dedupe_articles(articles: Iterable[RawArticle]) -> List[RawArticle]:
    seen = set()
    unique = []
    for article in articles:
        key = article_key(article)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


class ArticleCorpus:
    """
    有上限的文章缓冲区，先追加后裁剪（保留最近 N 篇）。

    Attributes:
        max_articles (int): 缓冲区上限
        _articles (List[RawArticle]): 按到达顺序存储的文章
    """

    def __init__(self, articles: Optional[Iterable[RawArticle]] = None, max_articles: Optional[int] = None):
        self.max_articles = max_articles if max_articles is not None else settings.CORPUS_MAX_ARTICLES
        self._lock = threading.Lock()
        self._articles: List[RawArticle] = self._trim(dedupe_articles(articles or []))

    def __len__(self) -> int:
        return len(self._articles)

    def _trim(self, articles: List[RawArticle]) -> List[RawArticle]:
        if len(articles) > self.max_articles:
            return articles[len(articles) - self.max_articles:]
        return articles

    def _merged(self, batch: Sequence[RawArticle]) -> List[RawArticle]:
        return self._trim(dedupe_articles(list(self._articles) + list(batch)))

    def preview(self, batch: Sequence[RawArticle]) -> Tuple[RawArticle, ...]:
        """
        返回加入 batch 之后的快照，但不修改缓冲区。

        Args:
            batch: 本批次文章

        Returns:
            不可变的文章元组
        """
        with self._lock:
            return tuple(self._merged(batch))

    def extend(self, batch: Sequence[RawArticle]) -> None:
        """
        追加一批文章并裁剪到上限。重复文章（同 URL 或同标题）只保留最早一篇。

        Args:
            batch: 本批次文章
        """
        with self._lock:
            before = len(self._articles)
            self._articles = self._merged(batch)
        logger.debug(f"Corpus: {before} -> {len(self._articles)} articles")

    def snapshot(self) -> Tuple[RawArticle, ...]:
        with self._lock:
            return tuple(self._articles)
