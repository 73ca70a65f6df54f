"""
Tests for image reference extraction.

Tests filtering rules, ordinals, raw offsets and tolerance of bad markup.
"""

from ldui.images.extract import extract_image_references, markup_length


class TestExtractImageReferences:
    """Test extract_image_references function."""

    def test_filters_data_uri_and_avatar(self):
        """Test that data URIs and avatar images are skipped."""
        markup = '<img src="data:x"><img class="avatar" src="a.png"><img src="b.png">'

        refs = extract_image_references(markup)

        assert [(r.url, r.ordinal) for r in refs] == [("b.png", 0)]

    def test_skips_icon_class(self):
        """Test that icon images are skipped."""
        markup = '<img class="emoji icon" src="i.png"><img class="big" src="c.png">'

        refs = extract_image_references(markup)

        assert [r.url for r in refs] == ["c.png"]

    def test_uppercase_data_uri_skipped(self):
        """Test that data URI detection is case-insensitive."""
        refs = extract_image_references('<img src="DATA:image/png;base64,AAAA">')

        assert refs == []

    def test_document_order_and_ordinals(self, sample_markup):
        """Test references come back in document order with dense ordinals."""
        refs = extract_image_references(sample_markup)

        assert [r.url for r in refs] == [
            "https://linux.do/uploads/one.png",
            "https://linux.do/uploads/two.jpg",
        ]
        assert [r.ordinal for r in refs] == [0, 1]

    def test_duplicate_urls_are_distinct_references(self):
        """Test that the same URL twice yields two references."""
        markup = '<p><img src="x.png"></p><p>text</p><p><img src="x.png"></p>'

        refs = extract_image_references(markup)

        assert len(refs) == 2
        assert refs[0].raw_offset == markup.index("<img")
        assert refs[1].raw_offset == markup.rindex("<img")

    def test_idempotent(self, sample_markup):
        """Test that identical input yields identical output."""
        first = extract_image_references(sample_markup)
        second = extract_image_references(sample_markup)

        assert first == second

    def test_raw_offset_points_at_tag(self, sample_markup):
        """Test raw offsets locate the opening tag."""
        refs = extract_image_references(sample_markup)

        for ref in refs:
            assert sample_markup[ref.raw_offset :].startswith("<img")
            assert ref.url in sample_markup[ref.raw_offset : ref.raw_offset + 80]

    def test_raw_offset_single_quotes(self):
        """Test that single-quoted sources are located."""
        markup = "<p>hi</p><img alt='a' src='q.png'>"

        refs = extract_image_references(markup)

        assert refs[0].raw_offset == markup.index("<img")

    def test_raw_offset_is_byte_offset(self):
        """Test offsets count UTF-8 bytes, not characters."""
        markup = '<p>你好</p><img src="z.png">'

        refs = extract_image_references(markup)

        assert refs[0].raw_offset == len('<p>你好</p>'.encode("utf-8"))
        assert markup_length(markup) == len(markup.encode("utf-8"))

    def test_escaped_source_located(self):
        """Test that entity-escaped sources are still located."""
        markup = '<img src="https://x.test/a.png?w=1&amp;h=2">'

        refs = extract_image_references(markup)

        assert refs[0].url == "https://x.test/a.png?w=1&h=2"
        assert refs[0].raw_offset == 0

    def test_unlocatable_tag_has_no_offset(self):
        """Test that a tag whose source text cannot be found has no offset."""
        # The parser decodes &#46; to '.', which appears nowhere in the raw text.
        markup = '<img src="pic&#46;png">'

        refs = extract_image_references(markup)

        assert refs[0].url == "pic.png"
        assert refs[0].raw_offset is None

    def test_missing_src_skipped(self):
        """Test that images without a source are skipped."""
        refs = extract_image_references('<img alt="none"><img src="">')

        assert refs == []

    def test_empty_markup(self):
        """Test that empty markup yields no references."""
        assert extract_image_references("") == []

    def test_malformed_markup_does_not_raise(self):
        """Test that broken markup degrades to a best-effort parse."""
        markup = '<div><p>unclosed <img src="ok.png"><img src="broken'

        refs = extract_image_references(markup)

        assert [r.url for r in refs][:1] == ["ok.png"]

    def test_custom_excluded_classes(self):
        """Test overriding the excluded class set."""
        markup = '<img class="avatar" src="a.png"><img class="thumb" src="t.png">'

        refs = extract_image_references(markup, excluded_classes=frozenset({"thumb"}))

        assert [r.url for r in refs] == ["a.png"]
