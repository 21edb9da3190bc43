"""Tests for title and image candidate extraction."""
import pytest

from linkdb.services.candidates import (
    Candidate,
    ImageSource,
    TitleSource,
    extract_candidates,
    find_background_image,
    first_non_empty,
)
from linkdb.services.document import HtmlDocument

ALL_TITLES_HTML = """
<html><head>
<meta property="og:title" content="OG">
<meta name="twitter:title" content="Twitter">
<meta itemprop="name" content="Itemprop">
<meta name="title" content="Meta">
<meta name="dcterms.title" content="Dublin">
<title>Document</title>
</head><body><h1>Heading</h1></body></html>
"""

ALL_IMAGES_HTML = """
<html><head>
<meta property="og:image" content="/og.jpg">
<meta property="og:image:secure_url" content="https://secure.example.com/og.jpg">
<meta name="twitter:image" content="/tw.jpg">
<meta name="twitter:image:src" content="/tw-src.jpg">
<link rel="image_src" href="/link.jpg">
<meta name="thumbnail" content="/thumb.jpg">
<meta itemprop="image" content="/schema.jpg">
<meta name="msapplication-TileImage" content="/tile.png">
</head><body>
<div style="background-image: url('/bg.jpg')"></div>
<img src="/first.png"><img src="/second.png">
</body></html>
"""


def candidates_for(html: str):
    return extract_candidates(HtmlDocument.parse(html))


def values(candidates):
    return [(c.source, c.value) for c in candidates]


class TestTitleCandidates:
    def test_all_tiers_in_priority_order(self):
        result = candidates_for(ALL_TITLES_HTML)
        assert values(result.titles) == [
            (TitleSource.OG_TITLE, "OG"),
            (TitleSource.TWITTER_TITLE, "Twitter"),
            (TitleSource.ITEMPROP_NAME, "Itemprop"),
            (TitleSource.META_TITLE, "Meta"),
            (TitleSource.DUBLIN_CORE_TITLE, "Dublin"),
            (TitleSource.TITLE_TAG, "Document"),
            (TitleSource.H1, "Heading"),
        ]

    def test_missing_tiers_are_empty(self):
        result = candidates_for("<html><body><h1>  Only heading </h1></body></html>")
        assert len(result.titles) == 7
        assert first_non_empty(result.titles) == Candidate("Only heading", TitleSource.H1)
        assert all(not c for c in result.titles[:-1])

    def test_empty_meta_content_falls_through(self):
        result = candidates_for(
            '<meta property="og:title" content="   ">'
            "<title>Fallback title</title>"
        )
        assert first_non_empty(result.titles).source is TitleSource.TITLE_TAG

    def test_itemprop_name_only_counts_on_meta(self):
        result = candidates_for('<span itemprop="name">Product</span>')
        assert not first_non_empty(result.titles)

    def test_dublin_core_variants(self):
        result = candidates_for('<meta name="DC.title" content="Classic">')
        assert first_non_empty(result.titles) == Candidate(
            "Classic", TitleSource.DUBLIN_CORE_TITLE
        )


class TestImageCandidates:
    def test_all_tiers_in_priority_order(self):
        result = candidates_for(ALL_IMAGES_HTML)
        assert values(result.images) == [
            (ImageSource.OG_IMAGE, "/og.jpg"),
            (ImageSource.OG_IMAGE_SECURE, "https://secure.example.com/og.jpg"),
            (ImageSource.TWITTER_IMAGE, "/tw.jpg"),
            (ImageSource.TWITTER_IMAGE_SRC, "/tw-src.jpg"),
            (ImageSource.LINK_IMAGE_SRC, "/link.jpg"),
            (ImageSource.THUMBNAIL_URL, "/thumb.jpg"),
            (ImageSource.ITEMPROP_IMAGE, "/schema.jpg"),
            (ImageSource.MS_TILE_IMAGE, "/tile.png"),
            (ImageSource.CSS_BACKGROUND, "/bg.jpg"),
            (ImageSource.IMG_TAG, "/first.png"),
        ]

    def test_meta_images_exclude_fallback_tiers(self):
        result = candidates_for(ALL_IMAGES_HTML)
        sources = {c.source for c in result.meta_images}
        assert ImageSource.CSS_BACKGROUND not in sources
        assert ImageSource.IMG_TAG not in sources
        assert len(result.meta_images) == 8

    def test_lower_tier_used_when_higher_missing(self):
        result = candidates_for(
            '<meta name="msapplication-TileImage" content="/tile.png">'
            '<meta name="twitter:image" content="/tw.jpg">'
        )
        assert first_non_empty(result.meta_images) == Candidate(
            "/tw.jpg", ImageSource.TWITTER_IMAGE
        )

    @pytest.mark.parametrize(
        "tag",
        [
            '<meta property="thumbnailUrl" content="/t.jpg">',
            '<meta name="thumbnail" content="/t.jpg">',
            '<meta itemprop="thumbnailUrl" content="/t.jpg">',
        ],
    )
    def test_thumbnail_attribute_variants(self, tag):
        result = candidates_for(tag)
        assert result.image(ImageSource.THUMBNAIL_URL).value == "/t.jpg"

    def test_thumbnail_property_wins_within_tier(self):
        result = candidates_for(
            '<meta itemprop="thumbnailUrl" content="/itemprop.jpg">'
            '<meta property="thumbnailUrl" content="/property.jpg">'
        )
        assert result.image(ImageSource.THUMBNAIL_URL).value == "/property.jpg"

    def test_first_img_without_src_gives_empty_candidate(self):
        result = candidates_for('<img alt="spacer"><img src="/real.png">')
        assert not result.image(ImageSource.IMG_TAG)

    def test_data_uris_are_not_candidates(self):
        result = candidates_for(
            '<meta property="og:image" content="data:image/png;base64,AAAA">'
            '<img src="data:image/gif;base64,R0lGOD">'
        )
        assert not result.image(ImageSource.OG_IMAGE)
        assert not result.image(ImageSource.IMG_TAG)

    def test_no_images(self):
        result = candidates_for("<p>text only</p>")
        assert len(result.images) == 10
        assert first_non_empty(result.images) is None


class TestBackgroundImage:
    def test_first_background_in_document_order(self):
        doc = HtmlDocument.parse(
            '<div style="color: blue"></div>'
            '<section style="BACKGROUND: #fff url(&quot;/one.jpg&quot;) no-repeat"></section>'
            '<div style="background-image:url(/two.jpg)"></div>'
        )
        assert find_background_image(doc) == "/one.jpg"

    def test_skips_background_without_url(self):
        doc = HtmlDocument.parse(
            '<div style="background: #000"></div>'
            '<div style="background-image: url( https://cdn.example.com/x.png )"></div>'
        )
        assert find_background_image(doc) == "https://cdn.example.com/x.png"

    def test_skips_data_uri(self):
        doc = HtmlDocument.parse(
            '<div style="background: url(data:image/png;base64,AAAA)"></div>'
            '<div style="background: url(/real.jpg)"></div>'
        )
        assert find_background_image(doc) == "/real.jpg"

    def test_none_found(self):
        assert find_background_image(HtmlDocument.parse("<div>x</div>")) is None


class TestFirstNonEmpty:
    def test_picks_first_with_value(self):
        candidates = [
            Candidate("", TitleSource.OG_TITLE),
            Candidate("b", TitleSource.TITLE_TAG),
            Candidate("c", TitleSource.H1),
        ]
        assert first_non_empty(candidates).value == "b"

    def test_all_empty(self):
        assert first_non_empty([Candidate("", TitleSource.H1)]) is None
        assert first_non_empty([]) is None
