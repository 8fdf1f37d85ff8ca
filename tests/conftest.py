"""Shared HTML fixtures for schedule page tests."""
import pytest

BASE_URL = "https://example.com/scout/index.html"


def _page(body: str) -> str:
    return f'<html><head><meta charset="utf-8"></head><body>{body}</body></html>'


def _venue_table(shop_name="渋谷店", address="東京都渋谷区道玄坂1-2-3",
                 schedule_nodes=None, row_count=3, tbody=False):
    """
    Build one result-list table.

    ``schedule_nodes`` is a list of strings: "hr" for a separator, anything
    else is the text of a ``strong`` node.
    """
    if schedule_nodes is None:
        schedule_nodes = ["2024年3月15日(金)\n開催 /18:30～"]
    schedule_html = "".join(
        "<hr>" if node == "hr" else f"<div><strong>{node}</strong></div>"
        for node in schedule_nodes
    )
    rows = [
        f'<tr><td><span class="shopname"> {shop_name} </span></td></tr>',
        f'<tr><td><div class="list-adtext-detitext">\n  {address}\n</div></td></tr>',
        f'<tr><td><div class="list-adtext-detitext">{schedule_html}</div></td></tr>',
    ]
    while len(rows) < row_count:
        rows.append('<tr><td>extra</td></tr>')
    rows = rows[:row_count]
    body = "".join(rows)
    if tbody:
        body = f"<tbody>{body}</tbody>"
    return f'<table class="shoplist_resultlist" cellpadding="0">{body}</table>'


def _index_page(event_title="フレンズスカウト 2024", areas=None):
    if areas is None:
        areas = [
            ("shop/shibuya.html", "渋谷"),
            ("https://other.example.com/shinjuku.html", "新宿"),
        ]
    area_html = ""
    for href, title in areas:
        attributes = ""
        if href is not None:
            attributes += f' href="{href}"'
        if title is not None:
            attributes += f' title="{title}"'
        area_html += f'<area shape="rect" coords="0,0,10,10"{attributes}>'
    title_html = ""
    if event_title is not None:
        title_html = f'<div id="title"><img src="title.png" alt="{event_title}"></div>'
    return _page(f'{title_html}<map id="m_shop" name="m_shop">{area_html}</map>')


@pytest.fixture
def venue_table():
    """Factory for a single result-list table."""
    return _venue_table


@pytest.fixture
def venue_page():
    """Factory wrapping tables into a full venue page."""
    def build(*tables):
        return _page("".join(tables))
    return build


@pytest.fixture
def index_page():
    """Factory for the schedule index page."""
    return _index_page
