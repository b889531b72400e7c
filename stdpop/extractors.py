"""Count extraction for the two supported response shapes.

pkg.go.dev renders the imported-by count inside a header fragment that has a
stable ``data-test-id`` on the label container but nothing on the number
itself::

    <span class="go-Main-headerDetailItem" data-test-id="UnitHeader-importedby">
      <a href="/runtime/debug?tab=importedby" aria-label="Go to Imported By">
        <span class="go-textSubtle">Imported by: </span>19,638
      </a>
    </span>

    SPAN
      TEXT
      A
        TEXT
        SPAN
        TEXT   <- "19,638"

The count is reached by hopping a fixed number of child/sibling steps from
the label. Any change to that markup breaks extraction; this is accepted and
surfaces as an ``ExtractionError`` per target.

The importers API answers with ``{"results": [{"path": ..., ...}, ...]}`` and
the count is the length of ``results``.
"""
from __future__ import annotations

import json
from typing import Any, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement

from .errors import ExtractionError

LABEL_TAG = "span"
LABEL_ATTR = "data-test-id"
LABEL_VALUE = "UnitHeader-importedby"
RESULTS_FIELD = "results"

Node = Union[Tag, NavigableString, PageElement]


def parse_html(body: Union[bytes, str]) -> BeautifulSoup:
    return BeautifulSoup(body, "html.parser")


def find_imported_by(node: Tag) -> Optional[Tag]:
    """Depth-first search for the imported-by label element."""
    if node.name == LABEL_TAG and node.get(LABEL_ATTR) == LABEL_VALUE:
        return node
    return node.find(LABEL_TAG, attrs={LABEL_ATTR: LABEL_VALUE})


def _first_child(node: Optional[Node]) -> Optional[Node]:
    if not isinstance(node, Tag) or not node.contents:
        return None
    return node.contents[0]


def _next_sibling(node: Optional[Node]) -> Optional[Node]:
    if node is None:
        return None
    return node.next_sibling


def hop_to_count(label: Tag) -> str:
    """Walk first child, next sibling, first child, next sibling, next sibling.

    Returns the raw text of the node reached, or "" when the markup does not
    have that shape.
    """
    node: Optional[Node] = _first_child(label)
    node = _next_sibling(node)
    node = _first_child(node)
    node = _next_sibling(node)
    node = _next_sibling(node)
    if not isinstance(node, NavigableString):
        return ""
    return str(node)


def imported_by_text(doc: Tag) -> str:
    label = find_imported_by(doc)
    if label is None:
        return ""
    return hop_to_count(label)


def parse_count(text: str) -> int:
    """Parse a thousands-separated numeral such as ``"19,638"``."""
    cleaned = text.strip().replace(",", "")
    if not cleaned.isdecimal():
        raise ExtractionError(f"invalid count {text!r}")
    return int(cleaned, 10)


def extract_imported_by(body: Union[bytes, str]) -> int:
    text = imported_by_text(parse_html(body))
    if not text:
        raise ExtractionError("failed to extract imported-by value")
    return parse_count(text)


def count_results(body: Union[bytes, str]) -> int:
    try:
        payload: Any = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ExtractionError(f"invalid json: {exc}") from exc

    if not isinstance(payload, dict):
        raise ExtractionError("expected a json object")
    results = payload.get(RESULTS_FIELD)
    if not isinstance(results, list):
        raise ExtractionError(f"missing {RESULTS_FIELD!r} array")
    if not all(isinstance(item, dict) for item in results):
        raise ExtractionError(f"{RESULTS_FIELD!r} must hold objects")
    return len(results)
