#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for task.py compare() and ComparisonTask."""

import logging

import pytest

from anydiff import compare
from anydiff.canonical import canonicalize
from anydiff.exceptions import MalformedInputError
from anydiff.filters import PathFilter, exclude_paths
from anydiff.options import TaskParameters
from anydiff.task import ComparisonTask


@pytest.mark.unit
class TestCompareScenarios:
    """End-to-end comparison scenarios."""

    def test_identical_markup(self):
        """Test that identical input yields no blocks and zero counts."""
        diff = compare("<a><b>1</b></a>", "<a><b>1</b></a>", content_format="html")
        assert diff.blocks == ()
        assert diff.counts.total == 0
        assert diff.counts_before_filter.total == 0
        assert diff.state == "unchanged"
        assert not diff.has_differences

    def test_changed_text(self):
        """Test one changed fragment at /a/b with single-character marks."""
        diff = compare("<a><b>1</b></a>", "<a><b>2</b></a>", content_format="html")
        assert len(diff.blocks) == 1
        block = diff.blocks[0]
        assert block.locator == "/a/b"
        assert len(block.fragments) == 1
        fragment = block.fragments[0]
        assert fragment.kind == "changed"
        assert fragment.left_marked.marked == ("1",)
        assert fragment.right_marked.marked == ("2",)
        assert diff.counts.changed == 1
        assert diff.state == "changed"

    def test_manifest_reformat(self, sample_manifest):
        """Test that a manifest equals its own canonical form."""
        canonical_text = canonicalize(sample_manifest, "manifest").text
        diff = compare(sample_manifest, canonical_text, content_format="manifest")
        assert diff.blocks == ()
        assert diff.counts.total == 0

    def test_location_filter_excludes_block(self):
        """Test that an excluded location removes the block but not the pre-filter counts."""
        diff = compare(
            "<a><b>1</b></a>",
            "<a><b>2</b></a>",
            filters=[exclude_paths("/a/b")],
            content_format="html",
        )
        assert diff.blocks == ()
        assert diff.counts.total == 0
        assert diff.counts_before_filter.total == 1
        assert diff.state == "unchanged"

    def test_single_filter_accepted(self):
        """Test that a bare filter is treated as a one-item chain."""
        diff = compare("<a><b>1</b></a>", "<a><b>2</b></a>", filters=PathFilter("/a/b"), content_format="xml")
        assert len(diff.blocks) == 1

    def test_fragment_cover_is_complete(self):
        """Test that the unfiltered fragments reproduce both canonical texts."""
        diff = compare("<r><x>1</x><y/></r>", "<r><x>2</x><z/></r>", content_format="xml")
        assert "".join(f.left or "" for f in diff.fragments) == diff.left.text
        assert "".join(f.right or "" for f in diff.fragments) == diff.right.text


@pytest.mark.unit
class TestCompareFormats:
    """Tests for format selection."""

    def test_detected_when_not_declared(self):
        """Test that formats are sniffed from content."""
        diff = compare("<a><b>1</b></a>", "<a><b>2</b></a>")
        assert diff.left.content_format == "xml"
        assert diff.blocks[0].locator == "/a/b"

    def test_label_used_as_file_name(self):
        """Test that labels with known extensions decide the format."""
        diff = compare("a\n", "b\n", left_label="one.html", right_label="two.html")
        assert diff.left.content_format == "html"

    def test_per_side_formats(self):
        """Test that per-side formats override the shared format."""
        diff = compare("<a>x</a>", "<a>x</a>", content_format="xml", right_format="plain")
        assert diff.left.content_format == "xml"
        assert diff.right.content_format == "plain"
        assert diff.has_differences

    def test_whitespace_only_changes_ignored(self):
        """Test ignore_spaces on plain text."""
        params = TaskParameters(ignore_spaces=True)
        diff = compare("a  b\n\tc\n", "a b\nc\n", params, content_format="plain")
        assert diff.blocks == ()

    def test_whitespace_only_plain_input_is_compared(self):
        """Test that whitespace-only plain sides differ unless spaces are ignored."""
        strict = compare("   ", "\t\t", TaskParameters(ignore_spaces=False), content_format="plain")
        assert strict.counts.changed == 1
        relaxed = compare("   ", "\t\t", TaskParameters(ignore_spaces=True), content_format="plain")
        assert relaxed.counts.total == 0

    def test_blank_lines_against_empty_plain_input(self):
        """Test that blank plain lines are reported against an empty side."""
        diff = compare("\n\n\n", "", content_format="plain")
        assert diff.counts.removed == 3
        assert diff.state == "right_missing"

    def test_ignore_spaces_keeps_word_boundaries(self):
        """Test that removing the space between two words is still a change."""
        diff = compare("foo bar\n", "foobar\n", TaskParameters(ignore_spaces=True), content_format="plain")
        assert diff.counts.changed == 1


@pytest.mark.unit
class TestCompareErrors:
    """Tests for error propagation."""

    def test_malformed_side_reported(self):
        """Test that the failing side and format are recorded."""
        with pytest.raises(MalformedInputError) as exc_info:
            compare("<a/>", "<a><b></a>", content_format="xml")
        assert exc_info.value.side == "right"
        assert exc_info.value.content_format == "xml"
        assert exc_info.value.original_error is not None

    def test_malformed_left(self):
        """Test a malformed left side."""
        with pytest.raises(MalformedInputError) as exc_info:
            compare("<a>", "<a/>", content_format="xml")
        assert exc_info.value.side == "left"


@pytest.mark.unit
class TestDiffState:
    """Tests for Diff.state and Diff.to_dict()."""

    def test_left_missing(self):
        """Test that an empty left side is reported as missing."""
        diff = compare("", "a\n", content_format="plain")
        assert diff.state == "left_missing"
        assert diff.counts.added == 1

    def test_right_missing(self):
        """Test that an empty right side is reported as missing."""
        diff = compare("<a>1</a>", "   ", content_format="xml")
        assert diff.state == "right_missing"

    def test_to_dict(self):
        """Test the JSON-ready result."""
        diff = compare("a\nb\n", "a\nc\n", content_format="plain", left_label="old", right_label="new")
        data = diff.to_dict()
        assert data["left"] == "old"
        assert data["state"] == "changed"
        assert data["format"] == {"left": "plain", "right": "plain"}
        assert data["blocks"][0]["locator"] == "-2,1 +2,1"
        assert data["counts"] == {"added": 0, "removed": 0, "changed": 1}


@pytest.mark.unit
class TestComparisonTask:
    """Tests for the ComparisonTask value object."""

    def test_identical_input_canonicalized_once(self, monkeypatch):
        """Test that identical raw input on both sides is canonicalized once."""
        calls = []
        import anydiff.task as task_module

        original = task_module.canonicalize

        def _counting(raw, content_format, params):
            calls.append(content_format)
            return original(raw, content_format, params)

        monkeypatch.setattr(task_module, "canonicalize", _counting)
        diff = ComparisonTask("<a/>", "<a/>", left_format="xml", right_format="xml").run()
        assert calls == ["xml"]
        assert diff.left is diff.right

    def test_debug_logging(self, caplog):
        """Test that a comparison emits debug records."""
        with caplog.at_level(logging.DEBUG, logger="anydiff"):
            compare("a\n", "b\n", content_format="plain")
        assert any("edit distance" in record.getMessage() for record in caplog.records)
