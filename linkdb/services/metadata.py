import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from linkdb.config import Settings, settings as default_settings
from linkdb.exceptions import InvalidInputError
from linkdb.services.candidates import (
    CandidateSet,
    ImageSource,
    extract_candidates,
    first_non_empty,
)
from linkdb.services.document import HtmlDocument
from linkdb.services.fetcher import PageFetcher
from linkdb.services.urls import absolutize, is_absolute_url

logger = logging.getLogger(__name__)

ReachabilityCheck = Callable[[str], Awaitable[bool]]


@dataclass(frozen=True)
class ExtractionResult:
    url: str
    title: str
    image: str | None = None


def resolve_title(candidates: CandidateSet) -> str:
    chosen = first_non_empty(candidates.titles)
    return chosen.value.strip() if chosen else ""


async def resolve_image(
    candidates: CandidateSet,
    source_url: str,
    is_reachable: ReachabilityCheck,
) -> str | None:
    """Pick the preview image for ``source_url``.

    The best meta-tag image is the only candidate checked over the network.
    When it is missing or dead, the CSS background and then the first <img>
    are taken unchecked.
    """
    primary = first_non_empty(candidates.meta_images)
    if primary:
        image = absolutize(primary.value, source_url)
        if await is_reachable(image):
            logger.info("Using %s image %s", primary.source.value, image)
            return image
        logger.warning("Image not accessible: %s, trying alternatives", image)
    else:
        logger.info("No meta tag images found for %s, trying alternatives", source_url)

    fallback = first_non_empty(
        (
            candidates.image(ImageSource.CSS_BACKGROUND),
            candidates.image(ImageSource.IMG_TAG),
        )
    )
    if not fallback:
        logger.warning("No fallback images found for %s", source_url)
        return None
    image = absolutize(fallback.value, source_url)
    if not is_absolute_url(image):
        logger.info("Discarding unusable %s image %r", fallback.source.value, image)
        return None
    logger.info("Fallback to %s image %s", fallback.source.value, image)
    return image


class MetadataService:
    """Fetch a page and resolve its title and preview image."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.fetcher = PageFetcher(settings or default_settings, transport=transport)

    async def extract(self, url: str) -> ExtractionResult:
        if not is_absolute_url(url):
            raise InvalidInputError("Invalid URL")

        logger.info("Fetching metadata for %s", url)
        fetched = await self.fetcher.fetch(url)
        document = HtmlDocument.parse(fetched.raw_body)
        candidates = extract_candidates(document)

        result = ExtractionResult(
            url=url,
            title=resolve_title(candidates),
            image=await resolve_image(candidates, url, self.fetcher.is_reachable),
        )
        logger.info(
            "Metadata for %s: title=%r image=%s", url, result.title, result.image
        )
        return result
