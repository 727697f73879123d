import pytest

from eventfusion.core.models.source_registry import (
    DEFAULT_RELIABILITY,
    any_wire_service,
    evaluate_source,
    get_source_reliability,
    is_wire_service,
)


@pytest.mark.parametrize("source,score", [
    ("Reuters", 0.95),
    ("AP News", 0.95),
    ("The Associated Press", 0.95),
    ("BBC News", 0.9),
    ("Haaretz", 0.85),
    ("Jerusalem Post", 0.8),
    ("Japan Times", DEFAULT_RELIABILITY),
    ("Local Blog", DEFAULT_RELIABILITY),
])
def test_known_outlets(source, score):
    assert get_source_reliability(source) == score


def test_custom_default():
    assert get_source_reliability("Unknown Gazette", default=0.6) == 0.6


def test_evaluation_details():
    result = evaluate_source("Reuters World")
    assert result.matched == "reuters"
    assert result.tier == "wire"
    assert evaluate_source("").reason == "No source name"
    assert evaluate_source("Haaretz").tier == "established"
    assert evaluate_source("Local Blog").tier == "unrated"


def test_wire_services():
    assert is_wire_service("CNN International")
    assert is_wire_service("AP")
    assert not is_wire_service("Haaretz")
    assert not is_wire_service("Japan Times")
    assert any_wire_service(["Haaretz", "BBC"])
    assert not any_wire_service([])
