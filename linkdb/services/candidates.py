"""Ordered title and image candidates pulled from a parsed page.

Each tier is a probe against one document location. Probes never raise: a
missing element or attribute yields an empty candidate so that every
``CandidateSet`` carries exactly one entry per tier, highest priority first.
"""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from linkdb.services.document import Element, HtmlDocument

logger = logging.getLogger(__name__)


class TitleSource(str, Enum):
    OG_TITLE = "og:title"
    TWITTER_TITLE = "twitter:title"
    ITEMPROP_NAME = "itemprop:name"
    META_TITLE = "meta:title"
    DUBLIN_CORE_TITLE = "dc:title"
    TITLE_TAG = "title"
    H1 = "h1"


class ImageSource(str, Enum):
    OG_IMAGE = "og:image"
    OG_IMAGE_SECURE = "og:image:secure_url"
    TWITTER_IMAGE = "twitter:image"
    TWITTER_IMAGE_SRC = "twitter:image:src"
    LINK_IMAGE_SRC = "link:image_src"
    THUMBNAIL_URL = "thumbnail_url"
    ITEMPROP_IMAGE = "itemprop:image"
    MS_TILE_IMAGE = "msapplication-TileImage"
    CSS_BACKGROUND = "css:background"
    IMG_TAG = "img"


# Sources consulted only after every meta-tag tier came up empty or dead.
FALLBACK_IMAGE_SOURCES = frozenset({ImageSource.CSS_BACKGROUND, ImageSource.IMG_TAG})


@dataclass(frozen=True)
class Candidate:
    value: str
    source: TitleSource | ImageSource

    def __bool__(self) -> bool:
        return bool(self.value)


@dataclass(frozen=True)
class CandidateSet:
    titles: tuple[Candidate, ...]
    images: tuple[Candidate, ...]

    @property
    def meta_images(self) -> tuple[Candidate, ...]:
        return tuple(c for c in self.images if c.source not in FALLBACK_IMAGE_SOURCES)

    def image(self, source: ImageSource) -> Candidate:
        for candidate in self.images:
            if candidate.source is source:
                return candidate
        return Candidate(value="", source=source)


def first_non_empty(candidates: Iterable[Candidate]) -> Candidate | None:
    """Return the highest-priority candidate that carries a value."""
    for candidate in candidates:
        if candidate:
            return candidate
    return None


Probe = Callable[[HtmlDocument], str | None]


def _meta(attr: str, value: str | re.Pattern[str], content: str = "content") -> Probe:
    return lambda doc: doc.first_attr("meta", content, **{attr: value})


def _any_meta(attrs: Iterable[str], value: re.Pattern[str]) -> Probe:
    def probe(doc: HtmlDocument) -> str | None:
        for attr in attrs:
            found = (doc.first_attr("meta", "content", **{attr: value}) or "").strip()
            if found:
                return found
        return None

    return probe


def _text(tag: str) -> Probe:
    return lambda doc: doc.first_text(tag)


TITLE_PROBES: tuple[tuple[TitleSource, Probe], ...] = (
    (TitleSource.OG_TITLE, _meta("property", "og:title")),
    (TitleSource.TWITTER_TITLE, _meta("name", "twitter:title")),
    (TitleSource.ITEMPROP_NAME, _meta("itemprop", "name")),
    (TitleSource.META_TITLE, _meta("name", "title")),
    (
        TitleSource.DUBLIN_CORE_TITLE,
        _meta("name", re.compile(r"^(dc|dcterms)\.title$", re.IGNORECASE)),
    ),
    (TitleSource.TITLE_TAG, _text("title")),
    (TitleSource.H1, _text("h1")),
)

META_IMAGE_PROBES: tuple[tuple[ImageSource, Probe], ...] = (
    (ImageSource.OG_IMAGE, _meta("property", "og:image")),
    (ImageSource.OG_IMAGE_SECURE, _meta("property", "og:image:secure_url")),
    (ImageSource.TWITTER_IMAGE, _meta("name", "twitter:image")),
    (ImageSource.TWITTER_IMAGE_SRC, _meta("name", "twitter:image:src")),
    (
        ImageSource.LINK_IMAGE_SRC,
        lambda doc: doc.first_attr("link", "href", rel="image_src"),
    ),
    (
        ImageSource.THUMBNAIL_URL,
        _any_meta(
            ("property", "name", "itemprop"),
            re.compile(r"^thumbnail(url)?$", re.IGNORECASE),
        ),
    ),
    (ImageSource.ITEMPROP_IMAGE, _meta("itemprop", "image")),
    (
        ImageSource.MS_TILE_IMAGE,
        _meta("name", re.compile(r"^msapplication-tileimage$", re.IGNORECASE)),
    ),
)

_BACKGROUND_STYLE = re.compile(r"background", re.IGNORECASE)
_CSS_URL = re.compile(r"""url\(\s*['"]?([^'")\s]+)['"]?\s*\)""", re.IGNORECASE)


def find_background_image(document: HtmlDocument) -> str | None:
    """Return the first inline-style ``background`` URL in document order."""
    found: list[str] = []

    def has_background(element: Element) -> bool:
        return bool(_BACKGROUND_STYLE.search(element.get("style") or ""))

    def take_url(element: Element) -> bool:
        for match in _CSS_URL.finditer(element.get("style") or ""):
            if not _is_data_uri(match.group(1)):
                found.append(match.group(1))
                return True
        return False

    document.for_each_element(has_background, take_url)
    return found[0] if found else None


def _first_img_src(document: HtmlDocument) -> str | None:
    # The first <img> decides, even when it has no src.
    return document.first_attr("img", "src")


def _is_data_uri(value: str) -> bool:
    return value.lstrip().lower().startswith("data:")


def _run(
    document: HtmlDocument, source: TitleSource | ImageSource, probe: Probe
) -> Candidate:
    return Candidate(value=(probe(document) or "").strip(), source=source)


def _image(document: HtmlDocument, source: ImageSource, probe: Probe) -> Candidate:
    candidate = _run(document, source, probe)
    if _is_data_uri(candidate.value):
        return Candidate(value="", source=source)
    return candidate


def extract_candidates(document: HtmlDocument) -> CandidateSet:
    titles = tuple(_run(document, source, probe) for source, probe in TITLE_PROBES)
    images = tuple(
        _image(document, source, probe) for source, probe in META_IMAGE_PROBES
    ) + (
        _image(document, ImageSource.CSS_BACKGROUND, find_background_image),
        _image(document, ImageSource.IMG_TAG, _first_img_src),
    )
    logger.debug(
        "Extracted candidates: titles=%s images=%s",
        [c.source.value for c in titles if c],
        [c.source.value for c in images if c],
    )
    return CandidateSet(titles=titles, images=images)
