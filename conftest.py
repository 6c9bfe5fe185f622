"""Shared page snapshots for the extraction and ingestion tests."""

import pytest

TABLE_PAGE = """
<html><body>
<header><nav><a href="/trending?geo=US-CA">Trending now</a></nav></header>
<table>
  <tr><th>Trends</th><th>Search volume</th><th>Started</th><th>Trend breakdown</th></tr>
  <tr data-row-id="1">
    <td><div role="checkbox">check_box_outline_blank</div></td>
    <td><div>Supreme Court ruling</div><div>20K+ searches · arrow_upward 1,000% · 3 hours ago</div></td>
    <td><div>20K+</div><div>arrow_upward 1,000%</div></td>
    <td><div>3 hours ago</div><div>trending_up Active</div></td>
    <td><span>scotus</span><span>Search term</span><span>query_stats</span><span>Explore</span></td>
    <td><a href="/trending/explore?q=supreme+court">more_vert</a></td>
  </tr>
  <tr>
    <td>check_box_outline_blank</td>
    <td>Election Reform 5K+ searches 6h ago</td>
    <td>5K+</td>
    <td>6 hours ago</td>
    <td>voting Search term</td>
  </tr>
  <tr>
    <td></td>
    <td>Governor debate</td>
    <td>500+</td>
    <td>2 days ago</td>
  </tr>
</table>
</body></html>
"""

ARTICLE_PAGE = """
<html><body>
<nav><a href="/trending?geo=US">Home</a></nav>
<main>
  <article>
    <h3>Border security bill</h3>
    <span>10K+ searches</span>
    <time>4 hours ago</time>
    <a href="/trending/explore?q=border">Explore</a>
  </article>
  <article>
    <h3>Sort by relevance</h3>
    <span>1K+</span>
  </article>
</main>
</body></html>
"""

LINKS_PAGE = """
<html><body>
<header><a href="/trending?geo=US-TX">Trending now in Texas</a></header>
<ul>
  <li><a href="/trending/explore?q=tax">Property tax vote</a> 2K+ searches, 5 hours ago</li>
  <li><a href="/trending/explore?q=x">Sign in</a></li>
</ul>
</body></html>
"""

HEADINGS_ONLY_PAGE = """
<html><body>
<h1>Google Trends</h1>
<h2>Statewide ballot measure</h2>
</body></html>
"""

EMPTY_PAGE = "<html><body><p>Nothing here</p></body></html>"


@pytest.fixture
def table_page() -> str:
    return TABLE_PAGE


@pytest.fixture
def article_page() -> str:
    return ARTICLE_PAGE


@pytest.fixture
def links_page() -> str:
    return LINKS_PAGE


@pytest.fixture
def headings_only_page() -> str:
    return HEADINGS_ONLY_PAGE


@pytest.fixture
def empty_page() -> str:
    return EMPTY_PAGE
