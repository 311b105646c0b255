"""Unit tests for migration.content_rewriter module."""

import logging
from pathlib import Path

import pytest
from src.export_reader.models import Attachment, Page
from src.migration.content_rewriter import (
    EMBED_PATTERN,
    ContentRewriter,
    attachment_source_path,
    find_embedded_filenames,
    is_safe_filename,
    strip_decorative_attributes,
)
from src.migration.models import PageBundle
from tests.fixtures.sample_exports import embed


@pytest.fixture
def rewriter():
    return ContentRewriter("/export", "/out")


def make_bundle(body, attachments=(), title="Home", page_id="P2"):
    return PageBundle(
        page=Page(page_id, title, 5, "5"),
        body=body.encode("utf-8"),
        attachments=list(attachments),
    )


class TestEmbedPattern:
    """Test cases for the attachment embed grammar."""

    def test_matches_canonical_embed(self):
        """The export's self-closing attachment embed matches."""
        match = EMBED_PATTERN.search(embed("diagram.png").encode())

        assert match.group(1) == b"diagram.png"

    def test_matches_image_attributes_and_whitespace(self):
        """Attributes on ac:image and whitespace between tags are allowed."""
        body = (
            b'<ac:image ac:height="250" ac:align="center">\n'
            b'  <ri:attachment ri:filename="a b.png"/>\n'
            b"</ac:image>"
        )

        assert EMBED_PATTERN.search(body).group(1) == b"a b.png"

    def test_matches_extra_attachment_attributes(self):
        """Attributes around ri:filename, such as ri:version-at-save, are allowed."""
        body = (
            b'<ac:image><ri:attachment ri:filename="logo.png" ri:version-at-save="1" /></ac:image>'
            b'<ac:image><ri:attachment ri:version-at-save="3" ri:filename="chart.png"/></ac:image>'
        )

        assert [m.group(1) for m in EMBED_PATTERN.finditer(body)] == [b"logo.png", b"chart.png"]

    def test_does_not_match_url_images(self):
        """Images referencing URLs are not attachment embeds."""
        body = b'<ac:image><ri:url ri:value="http://x/y.png" /></ac:image>'

        assert EMBED_PATTERN.search(body) is None

    def test_does_not_match_attachment_with_page_reference(self):
        """Embeds of attachments from other pages are not matched."""
        body = (
            b'<ac:image><ri:attachment ri:filename="x.png">'
            b'<ri:page ri:content-title="Other" /></ri:attachment></ac:image>'
        )

        assert EMBED_PATTERN.search(body) is None

    def test_find_embedded_filenames(self):
        """All embedded filenames are returned in order, entities decoded."""
        body = (embed("a.png") + "<p>text</p>" + embed("b&amp;c.png")).encode()

        assert find_embedded_filenames(body) == ["a.png", "b&c.png"]


class TestStripDecorativeAttributes:
    """Test cases for strip_decorative_attributes."""

    def test_strips_single_attribute(self):
        """An attribute on span is removed, the tag is kept."""
        assert strip_decorative_attributes(b'<span style="color: red;">x</span>') == b"<span>x</span>"

    def test_strips_multiple_attributes(self):
        """All attributes are removed, including single-quoted ones."""
        body = b"<span class=\"a\" data-x='1' title=\"t\">x</span>"

        assert strip_decorative_attributes(body) == b"<span>x</span>"

    def test_bare_span_unchanged(self):
        """A span without attributes is left as is."""
        assert strip_decorative_attributes(b"<span>x</span>") == b"<span>x</span>"

    def test_other_tags_untouched(self):
        """Tags outside the allow-list keep their attributes."""
        body = b'<p style="x"><a href="y">z</a></p>'

        assert strip_decorative_attributes(body) == body

    def test_similar_tag_names_untouched(self):
        """Only the exact tag name is stripped."""
        body = b'<spanner class="x">y</spanner>'

        assert strip_decorative_attributes(body) == body


class TestIsSafeFilename:
    """Test cases for is_safe_filename."""

    @pytest.mark.parametrize("title", ["logo.png", "a b.png", "..hidden", "v1..2.txt", "Grüße.pdf"])
    def test_plain_names_are_safe(self, title):
        """Ordinary file names, including ones with dots, are accepted."""
        assert is_safe_filename(title) is True

    @pytest.mark.parametrize("title", ["", ".", "..", "../x", "a/b", "a\\b", "nul\0.png"])
    def test_path_like_names_are_unsafe(self, title):
        """Empty names, dot names and names with separators are rejected."""
        assert is_safe_filename(title) is False


class TestAttachmentSourcePath:
    """Test cases for attachment_source_path."""

    def test_content_addressed_layout(self):
        """Path is attachments/<page>/<attachment>/<revision>."""
        attachment = Attachment("A2", "logo.png", 0x31, "1")

        path = attachment_source_path("/export/", "P2", attachment)

        assert path == Path("/export/attachments/P2/A2/1")

    def test_revision_label_used_literally(self):
        """The literal version text is used, not the decoded number."""
        attachment = Attachment("A2", "logo.png", 49, "12")

        assert attachment_source_path("/e", "P2", attachment).name == "12"

    def test_decoded_revision_used_without_label(self):
        """Without version text the decoded revision is used."""
        attachment = Attachment("A2", "logo.png", 3, "")

        assert attachment_source_path("/e", "P2", attachment).name == "3"


class TestRewrite:
    """Test cases for ContentRewriter.rewrite."""

    def test_embed_rewritten_to_portable_image(self, rewriter):
        """A resolved embed becomes an image into the page's directory."""
        bundle = make_bundle(
            f"<p>See</p>{embed('diagram.png')}",
            [Attachment("A2", "diagram.png", 1, "1")],
        )

        result = rewriter.rewrite(bundle)

        assert result.slug == "Home"
        assert result.body == b'<p>See</p><img src="Home/diagram.png" alt="diagram.png">'
        assert result.attachment_dir == Path("/out/Home")
        assert len(result.copy_jobs) == 1
        job = result.copy_jobs[0]
        assert job.source_path == Path("/export/attachments/P2/A2/1")
        assert job.dest_path == Path("/out/Home/diagram.png")
        assert result.unresolved == []

    def test_slug_used_for_link_target(self, rewriter):
        """Links point into the slug directory of the page."""
        bundle = make_bundle(
            embed("logo.png"),
            [Attachment("A1", "logo.png", 1, "1")],
            title="Über uns",
        )

        result = rewriter.rewrite(bundle)

        assert b'src="UeberUns/logo.png"' in result.body
        assert result.copy_jobs[0].dest_path == Path("/out/UeberUns/logo.png")

    def test_unresolved_embed_left_unchanged(self, rewriter):
        """An embed without matching attachment stays and is reported."""
        body = embed("missing.png")
        bundle = make_bundle(body, [Attachment("A1", "other.png", 1, "1")])

        result = rewriter.rewrite(bundle)

        assert result.body == body.encode()
        assert result.copy_jobs == []
        assert result.unresolved == ["missing.png"]

    def test_title_match_is_case_sensitive(self, rewriter):
        """Attachment titles are matched exactly."""
        bundle = make_bundle(embed("Logo.png"), [Attachment("A1", "logo.png", 1, "1")])

        result = rewriter.rewrite(bundle)

        assert result.unresolved == ["Logo.png"]

    def test_first_attachment_wins_on_title_collision(self, rewriter):
        """With two attachments of the same title, the first in the bundle is used."""
        bundle = make_bundle(
            embed("logo.png"),
            [Attachment("A1", "logo.png", 1, "1"), Attachment("A9", "logo.png", 1, "1")],
        )

        result = rewriter.rewrite(bundle)

        assert [j.attachment.identity for j in result.copy_jobs] == ["A1"]

    def test_repeated_embed_copied_once(self, rewriter):
        """Embedding the same file twice rewrites both and copies it once."""
        bundle = make_bundle(
            embed("logo.png") + embed("logo.png"),
            [Attachment("A1", "logo.png", 1, "1")],
        )

        result = rewriter.rewrite(bundle)

        assert result.body.count(b"<img ") == 2
        assert len(result.copy_jobs) == 1

    def test_embed_with_version_attribute_rewritten(self, rewriter):
        """Embeds carrying ri:version-at-save are resolved like plain ones."""
        bundle = make_bundle(
            '<ac:image ac:width="300"><ri:attachment ri:filename="logo.png" ri:version-at-save="1" /></ac:image>',
            [Attachment("A1", "logo.png", 1, "1")],
        )

        result = rewriter.rewrite(bundle)

        assert result.body == b'<img src="Home/logo.png" alt="logo.png">'
        assert len(result.copy_jobs) == 1
        assert result.unresolved == []

    @pytest.mark.parametrize("title", ["../../escape.png", "..", ".", "sub/logo.png", "a\\b.png"])
    def test_unsafe_attachment_title_not_copied(self, rewriter, title, caplog):
        """Titles that would leave the attachment directory are reported, not copied."""
        bundle = make_bundle(embed(title), [Attachment("A1", title, 1, "1")])

        with caplog.at_level(logging.WARNING):
            result = rewriter.rewrite(bundle)

        assert result.copy_jobs == []
        assert result.unresolved == [title]
        assert result.body == embed(title).encode()
        assert "unsafe path component" in caplog.text

    def test_unsafe_revision_label_not_copied(self, rewriter):
        """A storage path segment that climbs out of the export is rejected."""
        bundle = make_bundle(embed("logo.png"), [Attachment("A1", "logo.png", 1, "..")])

        result = rewriter.rewrite(bundle)

        assert result.copy_jobs == []
        assert result.unresolved == ["logo.png"]

    def test_unreferenced_attachments_not_copied(self, rewriter):
        """Attachments that are never embedded produce no copy job."""
        bundle = make_bundle("<p>No images</p>", [Attachment("A1", "logo.png", 1, "1")])

        result = rewriter.rewrite(bundle)

        assert result.copy_jobs == []

    def test_decorative_attributes_stripped(self, rewriter):
        """Span attributes are stripped as part of the rewrite."""
        bundle = make_bundle('<p><span style="color: red;">Red</span></p>')

        assert rewriter.rewrite(bundle).body == b"<p><span>Red</span></p>"

    def test_special_characters_escaped_in_image(self, rewriter):
        """Quotes and ampersands in titles are escaped in the image tag."""
        bundle = make_bundle(
            embed("a&amp;b.png"),
            [Attachment("A1", "a&b.png", 1, "1")],
        )

        result = rewriter.rewrite(bundle)

        assert result.body == b'<img src="Home/a&amp;b.png" alt="a&amp;b.png">'
        assert result.copy_jobs[0].dest_path == Path("/out/Home/a&b.png")

    def test_empty_body(self, rewriter):
        """An empty body rewrites to an empty body."""
        result = rewriter.rewrite(make_bundle(""))

        assert result.body == b""
        assert result.copy_jobs == []

    def test_bundle_not_mutated(self, rewriter):
        """The bundle body is left untouched."""
        bundle = make_bundle(embed("logo.png"), [Attachment("A1", "logo.png", 1, "1")])
        original = bundle.body

        rewriter.rewrite(bundle)

        assert bundle.body == original
