from eventfusion.core.corpus import ArticleCorpus, dedupe_articles
from eventfusion.core.models.events import CandidateEvent, CanonicalEvent, EventType
from eventfusion.core.verification.verifier import EventVerifier


def test_extend_and_trim(make_article):
    corpus = ArticleCorpus(max_articles=3)
    corpus.extend([make_article(title=f"Report {i}") for i in range(5)])
    assert len(corpus) == 3
    assert [a.title for a in corpus.snapshot()] == ["Report 2", "Report 3", "Report 4"]


def test_duplicate_urls_keep_first(make_article):
    first = make_article(title="Missile hits Haifa", url="https://n.example/1")
    again = make_article(title="Missile hits Haifa (updated)", url="https://n.example/1")
    assert dedupe_articles([first, again]) == [first]

    corpus = ArticleCorpus([first])
    corpus.extend([again])
    assert corpus.snapshot() == (first,)


def test_title_used_without_url(make_article):
    a = make_article(title="Sirens in Haifa", url="")
    b = make_article(title="Sirens in Haifa", url="")
    assert len(dedupe_articles([a, b])) == 1


def test_same_headline_from_different_outlets_kept(make_article, published):
    reuters = make_article(title="Missile hits Haifa port", url="")
    bbc = make_article(title="Missile hits Haifa port", url="", source="BBC")

    preview = ArticleCorpus().preview([reuters, bbc])
    assert [a.source_name for a in preview] == ["Reuters", "BBC"]

    event = CanonicalEvent.from_candidate(CandidateEvent(
        id="event-haifa",
        event_time=published,
        temporal_confidence=0.3,
        event_type=EventType.MISSILE,
        title="Missile hits Haifa port",
        location="Haifa",
        source="Reuters",
    ))
    result = EventVerifier().verify_event(event, preview)
    assert result.sources == ["Reuters", "BBC"]
    assert result.verified is True


def test_zero_capacity(make_article):
    corpus = ArticleCorpus(max_articles=0)
    corpus.extend([make_article(title="Sirens in Haifa")])
    assert len(corpus) == 0
    assert corpus.snapshot() == ()


def test_preview_does_not_mutate(make_article):
    existing = make_article(title="Talks in Vienna")
    corpus = ArticleCorpus([existing])
    batch = [make_article(title="Missile hits Haifa")]

    preview = corpus.preview(batch)
    assert [a.title for a in preview] == ["Talks in Vienna", "Missile hits Haifa"]
    assert len(corpus) == 1

    corpus.extend(batch)
    assert corpus.snapshot() == preview


def test_initial_articles_trimmed(make_article):
    corpus = ArticleCorpus([make_article(title=f"Report {i}") for i in range(4)], max_articles=2)
    assert [a.title for a in corpus.snapshot()] == ["Report 2", "Report 3"]
