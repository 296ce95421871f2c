"""Tests for page parsing and the document loader."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from docsearch.documents.loader import DocumentLoader
from docsearch.documents.parser import (
    extract_heading_structure,
    find_first_heading,
    generate_anchor,
    parse_document_metadata,
)
from docsearch.documents.schemas import UNKNOWN_URL, UNTITLED_DOCUMENT

# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class TestParseDocumentMetadata:
    def test_title_and_url(self):
        meta = parse_document_metadata("# Agent Card\nURL: /docs/agent-card\n\n## A\nx")
        assert meta.title == "Agent Card"
        assert meta.url == "/docs/agent-card"

    def test_defaults_when_header_missing(self):
        meta = parse_document_metadata("plain text\nmore text")
        assert meta.title == UNTITLED_DOCUMENT
        assert meta.url == UNKNOWN_URL
        assert meta.description is None

    def test_full_url_prefixes_base(self):
        meta = parse_document_metadata(
            "# T\nURL: /docs/t", base_url="https://google-a2a.vercel.app"
        )
        assert meta.full_url == "https://google-a2a.vercel.app/docs/t"

    def test_description_skips_frontmatter_keys(self):
        text = textwrap.dedent("""\
            # Streaming
            URL: /docs/streaming
            ***
            title: Streaming
            icon: bolt

            ---
            Long running tasks can stream updates.

            ## Events
            body
        """)
        meta = parse_document_metadata(text)
        assert meta.description == "Long running tasks can stream updates."

    def test_description_skips_indented_frontmatter_keys(self):
        text = (
            "# Streaming\nURL: /docs/streaming\n***\n"
            "  title: Streaming\n  icon: bolt\nReal description."
        )
        meta = parse_document_metadata(text)
        assert meta.description == "Real description."

    def test_no_separator_no_description(self):
        meta = parse_document_metadata("# T\nURL: /docs/t\n\nSome text")
        assert meta.description is None


# ---------------------------------------------------------------------------
# Anchors
# ---------------------------------------------------------------------------


class TestGenerateAnchor:
    def test_simple(self):
        assert generate_anchor("Agent Card") == "agent-card"

    def test_drops_punctuation(self):
        assert generate_anchor("What's New? (v2)") == "whats-new-v2"

    def test_collapses_hyphens(self):
        assert generate_anchor("A  --  B") == "a-b"

    def test_keeps_underscores(self):
        assert generate_anchor("task_id field") == "task_id-field"

    def test_unicode_space_becomes_hyphen(self):
        assert generate_anchor("Agent\u00a0Card") == "agent-card"

    def test_non_ascii_letters_dropped(self):
        assert generate_anchor("Café Setup") == "caf-setup"


# ---------------------------------------------------------------------------
# Heading structure
# ---------------------------------------------------------------------------


class TestExtractHeadingStructure:
    def test_nesting_and_end_lines(self):
        text = "## A\ntext a\n### B\ntext b\n## C\ntext c"
        roots = extract_heading_structure(text)

        assert [r.text for r in roots] == ["A", "C"]
        a, c = roots
        assert [child.text for child in a.children] == ["B"]
        assert a.end_line == 3
        assert a.children[0].end_line == 3
        assert c.end_line == 5

    def test_content_includes_nested_lines(self):
        roots = extract_heading_structure("## A\ntext a\n### B\ntext b\n## C\ntext c")
        assert roots[0].content == "text a\n### B\ntext b"
        assert roots[0].children[0].content == "text b"
        assert roots[1].content == "text c"

    def test_skips_title_inside_frontmatter_block(self, agent_card_page):
        roots = extract_heading_structure(agent_card_page)
        assert [r.text for r in roots] == ["Overview", "Discovery"]
        assert [c.text for c in roots[0].children] == ["Required Fields", "Example Card"]
        assert roots[0].level == 2

    def test_without_separator_title_is_a_root(self):
        roots = extract_heading_structure("# Guide\nURL: /docs/g\n## Part\nbody")
        assert len(roots) == 1
        assert roots[0].level == 1
        assert roots[0].children[0].text == "Part"

    def test_deeper_heading_after_shallow(self):
        roots = extract_heading_structure("### Deep\nx\n## Shallow\ny")
        assert [r.text for r in roots] == ["Deep", "Shallow"]

    def test_no_headings(self):
        assert extract_heading_structure("just text\nno headings") == []

    def test_anchor_assigned(self):
        roots = extract_heading_structure("## Push Notifications\nbody")
        assert roots[0].anchor == "push-notifications"


class TestFindFirstHeading:
    def test_found(self):
        assert find_first_heading("intro\n\n## H\nbody") == 2

    def test_missing(self):
        assert find_first_heading("no headings here") == -1

    def test_requires_space_after_hashes(self):
        assert find_first_heading("#hashtag\n# Real") == 1


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class TestDocumentLoader:
    def test_load_markdown(self, sample_page_file: Path):
        result = DocumentLoader().load_file(sample_page_file)
        assert result.text.startswith("# Agent Card")
        assert result.format == "md"
        assert result.source_path == str(sample_page_file)
        assert result.char_count == len(result.text)
        assert result.warnings == []

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            DocumentLoader().load_file(tmp_path / "nope.md")

    def test_unsupported_extension(self, tmp_path: Path):
        p = tmp_path / "data.pdf"
        p.write_bytes(b"%PDF")
        with pytest.raises(ValueError, match="Unsupported format"):
            DocumentLoader().load_file(p)

    def test_load_bytes_invalid_utf8(self):
        result = DocumentLoader().load_bytes(b"## H\n\xff\xfe body", "page.mdx")
        assert result.format == "mdx"
        assert "�" in result.text
        assert len(result.warnings) == 1

    def test_load_directory_sorted_and_filtered(self, tmp_path: Path):
        (tmp_path / "b.md").write_text("## B\nbody", encoding="utf-8")
        (tmp_path / "a.txt").write_text("## A\nbody", encoding="utf-8")
        (tmp_path / "skip.json").write_text("{}", encoding="utf-8")
        sub = tmp_path / "nested"
        sub.mkdir()
        (sub / "c.mdx").write_text("## C\nbody", encoding="utf-8")

        results = DocumentLoader().load_directory(tmp_path)
        names = [Path(r.source_path).name for r in results]
        assert names == ["a.txt", "b.md", "c.mdx"]

    def test_load_directory_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            DocumentLoader().load_directory(tmp_path / "missing")
