import pytest
from bs4 import BeautifulSoup

from aggregation_engine.models import UNKNOWN, RawCandidate
from extraction.cascade import ExtractionCascade, ExtractionStrategy
from extraction.strategies import extract_structured_rows, title_before_volume
from statemap_engine.errors import ExtractionExhausted, ValidationRejectedAll


def test_structured_rows_fields(table_page) -> None:
    candidates = extract_structured_rows(BeautifulSoup(table_page, "html.parser"), "https://trends.google.com")
    assert [c.title for c in candidates] == ["Supreme Court ruling", "Election Reform", "Governor debate"]

    first = candidates[0]
    assert first.search_volume == "20K+"
    assert first.started == "3 hours ago"
    assert first.percentage_increase == "1000%"
    assert first.trend_breakdown == "scotus"
    assert first.link == "https://trends.google.com/trending/explore?q=supreme+court"

    second = candidates[1]
    assert second.search_volume == "5K+"
    assert second.started == "6 hours ago"
    assert second.percentage_increase is None
    assert second.trend_breakdown == "voting"
    assert second.link is None

    assert candidates[2].started == "2 days ago"
    assert candidates[2].trend_breakdown is None


def test_growth_read_from_attributes_when_cells_have_none() -> None:
    html = """
    <table>
      <tr>
        <td>Bail reform bill</td><td>5K+ searches</td><td>2 hours ago</td>
        <td><span class="material-icons" aria-label="Search interest up 500%"></span></td>
      </tr>
      <tr data-growth="+200%">
        <td>Zoning vote</td><td>1K+</td><td>5 hours ago</td>
      </tr>
    </table>
    """
    candidates = extract_structured_rows(BeautifulSoup(html, "html.parser"), "https://trends.google.com")
    assert [c.title for c in candidates] == ["Bail reform bill", "Zoning vote"]
    assert [c.percentage_increase for c in candidates] == ["500%", "200%"]


def test_title_skips_icon_ligatures() -> None:
    assert title_before_volume("check_box_outline_blank ifc 1K+ searches") == "ifc"


def test_table_page_uses_structured_rows(table_page) -> None:
    result = ExtractionCascade().run(table_page)
    assert result.strategy == "structured_rows"
    assert len(result.topics) == 3
    assert [attempt.name for attempt in result.attempts] == ["structured_rows"]


def test_falls_back_to_articles(article_page) -> None:
    result = ExtractionCascade().run(article_page)
    assert result.strategy == "article_elements"
    assert [topic.title for topic in result.topics] == ["Border security bill"]
    topic = result.topics[0]
    assert topic.search_volume == "10K+"
    assert topic.started == "4 hours ago"
    assert topic.link == "https://trends.google.com/trending/explore?q=border"
    assert result.attempts[0].raw_count == 0


def test_falls_back_to_links_outside_navigation(links_page) -> None:
    result = ExtractionCascade().run(links_page)
    assert result.strategy == "link_harvest"
    assert [topic.title for topic in result.topics] == ["Property tax vote"]
    assert result.topics[0].search_volume == "2K+"
    assert result.topics[0].started == "5 hours ago"


def test_heading_only_page_is_rejected_by_validation(headings_only_page) -> None:
    with pytest.raises(ValidationRejectedAll):
        ExtractionCascade().run(headings_only_page)


def test_empty_page_exhausts_every_strategy(empty_page) -> None:
    with pytest.raises(ExtractionExhausted):
        ExtractionCascade().run(empty_page)


def test_strategy_order_and_isolation() -> None:
    calls = []

    def broken(soup, base_url):
        calls.append("broken")
        raise RuntimeError("markup changed")

    def noise(soup, base_url):
        calls.append("noise")
        return [RawCandidate(title="Sort by", search_volume="1K+")]

    def good(soup, base_url):
        calls.append("good")
        return [RawCandidate(title="Senate race", started="1 hour ago")]

    def never(soup, base_url):
        calls.append("never")
        return []

    cascade = ExtractionCascade(
        [
            ExtractionStrategy("broken", broken),
            ExtractionStrategy("noise", noise),
            ExtractionStrategy("good", good),
            ExtractionStrategy("never", never),
        ]
    )
    result = cascade.run("<html></html>")

    assert calls == ["broken", "noise", "good"]
    assert result.strategy == "good"
    assert result.topics[0].search_volume == UNKNOWN
    assert [(a.name, a.raw_count, a.valid_count) for a in result.attempts] == [
        ("broken", 0, 0),
        ("noise", 1, 0),
        ("good", 1, 1),
    ]
