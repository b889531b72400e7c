"""Tests for HTML and JSON count extraction."""

import json
import unittest

from bs4 import BeautifulSoup

from stdpop.errors import ExtractionError
from stdpop.extractors import (
    count_results,
    extract_imported_by,
    find_imported_by,
    hop_to_count,
    imported_by_text,
    parse_count,
    parse_html,
)

from fakes import NO_LABEL_HTML, imported_by_page


class TestImportedByText(unittest.TestCase):
    """Verify the label search and the fixed hop sequence."""

    def test_returns_raw_numeral(self):
        doc = parse_html(imported_by_page("19,638"))
        self.assertEqual(imported_by_text(doc).strip(), "19,638")

    def test_missing_label_returns_empty(self):
        doc = parse_html(NO_LABEL_HTML)
        self.assertIsNone(find_imported_by(doc))
        self.assertEqual(imported_by_text(doc), "")

    def test_label_is_found_when_nested_deep(self):
        html = "<div><section><p>" + imported_by_page("7").decode() + "</p></section></div>"
        self.assertEqual(imported_by_text(parse_html(html)).strip(), "7")

    def test_hop_sequence_is_pinned(self):
        """first child -> next sibling -> first child -> next sibling -> next sibling."""
        label = BeautifulSoup(
            '<span data-test-id="UnitHeader-importedby">'
            "T1<a>T2<span>Imported by: </span>42</a>"
            "</span>",
            "html.parser",
        ).span
        self.assertEqual(hop_to_count(label), "42")

    def test_hop_on_unexpected_shape_returns_empty(self):
        """Markup without the leading whitespace node breaks the hop chain."""
        label = BeautifulSoup(
            '<span data-test-id="UnitHeader-importedby">'
            "<a><span>Imported by: </span>42</a>"
            "</span>",
            "html.parser",
        ).span
        self.assertEqual(hop_to_count(label), "")

    def test_hop_landing_on_element_returns_empty(self):
        label = BeautifulSoup(
            '<span data-test-id="UnitHeader-importedby">'
            "T1<a>T2<span>Imported by: </span><b>42</b></a>"
            "</span>",
            "html.parser",
        ).span
        self.assertEqual(hop_to_count(label), "")


class TestParseCount(unittest.TestCase):
    """Verify numeral post-processing."""

    def test_strips_separators_and_whitespace(self):
        self.assertEqual(parse_count("19,638"), 19638)
        self.assertEqual(parse_count("\n   1,234,567  \n"), 1234567)

    def test_zero(self):
        self.assertEqual(parse_count("0"), 0)

    def test_malformed_raises_extraction_error(self):
        for text in ("N/A", "", "  ", "-5", "12.5"):
            with self.subTest(text=text):
                with self.assertRaises(ExtractionError):
                    parse_count(text)


class TestExtractImportedBy(unittest.TestCase):
    """Verify the full markup strategy."""

    def test_page_yields_count(self):
        self.assertEqual(extract_imported_by(imported_by_page("19,638")), 19638)

    def test_page_without_label_raises(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_imported_by(NO_LABEL_HTML.encode())
        self.assertIn("imported-by", str(ctx.exception))

    def test_non_numeric_count_raises(self):
        with self.assertRaises(ExtractionError):
            extract_imported_by(imported_by_page("N/A"))


class TestCountResults(unittest.TestCase):
    """Verify the JSON strategy."""

    def test_counts_results_array(self):
        body = json.dumps({"results": [{"path": f"example.com/m{i}"} for i in range(5)]}).encode()
        self.assertEqual(count_results(body), 5)

    def test_empty_results_is_zero(self):
        self.assertEqual(count_results(b'{"results": []}'), 0)

    def test_undecodable_body_raises(self):
        with self.assertRaises(ExtractionError):
            count_results(b"<html>not json</html>")

    def test_missing_results_field_raises(self):
        with self.assertRaises(ExtractionError):
            count_results(b'{"error": "not found"}')

    def test_non_object_top_level_raises(self):
        with self.assertRaises(ExtractionError):
            count_results(b"[1, 2, 3]")

    def test_non_object_elements_raise(self):
        with self.assertRaises(ExtractionError):
            count_results(b'{"results": [1, 2]}')


if __name__ == "__main__":
    unittest.main()
