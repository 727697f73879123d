import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..config.settings import settings
from ..core.corpus import ArticleCorpus
from ..core.models.verification import VerifiedEvent
from ..graph.workflow import FusionPipeline, coerce_articles

logger = logging.getLogger("EventFusion")


def _load_articles(path: Path) -> List[Dict[str, Any]]:
    """读取 JSON 文章数组 (也接受 {"articles": [...]} 包装)"""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("articles", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of articles")
    return data


def _render_summary(events: List[VerifiedEvent]) -> str:
    lines = []
    for event in events:
        mark = "✅" if event.verified else "❔"
        lines.append(
            f"{mark} {event.timestamp} [{event.event_type.value}/{event.severity.value}] "
            f"{event.title} @ {event.location} "
            f"(conf {event.confidence:.2f}, verify {event.verification_confidence:.2f}, "
            f"sources: {', '.join(event.sources)})"
        )
    return "\n".join(lines)


async def run_pipeline(
    articles_path: Path,
    corpus_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
) -> List[VerifiedEvent]:
    corpus = ArticleCorpus()
    if corpus_path:
        corpus.extend(coerce_articles(_load_articles(corpus_path)))
        logger.info(f"Loaded {len(corpus)} corpus articles from {corpus_path}")

    articles = coerce_articles(_load_articles(articles_path))
    logger.info(f"Processing batch of {len(articles)} articles")

    events = await FusionPipeline(corpus).process_batch(articles)
    records = [e.to_record() for e in events]
    payload = json.dumps(records, ensure_ascii=False, indent=2)

    if output_path:
        output_path.write_text(payload, encoding="utf-8")
        logger.info(f"Wrote {len(records)} events to {output_path}")
    else:
        print(payload)

    if events:
        logger.info("\n" + _render_summary(events))
    return events


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="EventFusion: conflict news event fusion pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  eventfusion articles.json
  eventfusion articles.json --corpus recent.json --output events.json
        """
    )
    parser.add_argument("articles", type=Path, help="本批次文章 (JSON 数组)")
    parser.add_argument("--corpus", type=Path, default=None, help="近期文章语料 (JSON 数组)，用于交叉验证")
    parser.add_argument("--output", type=Path, default=None, help="输出文件；不指定则打印到 stdout")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help="日志级别",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        asyncio.run(run_pipeline(args.articles, args.corpus, args.output))
    except (OSError, ValidationError, ValueError) as e:
        logger.error(f"Failed to process {args.articles}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
