import logging
from dataclasses import dataclass

import httpx

from linkdb.config import Settings
from linkdb.exceptions import (
    BodyReadError,
    InvalidInputError,
    RemoteHttpError,
    TransportFailureError,
)

logger = logging.getLogger(__name__)

_HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass(frozen=True)
class FetchedDocument:
    final_url: str
    status_code: int
    content_type: str
    raw_body: str

    @property
    def is_html(self) -> bool:
        return self.content_type.split(";")[0].strip().lower() in _HTML_CONTENT_TYPES


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class PageFetcher:
    """Single-request HTTP access for one extraction run.

    Every call opens and closes its own client, so nothing is shared between
    runs. ``transport`` replaces the network, which is how the tests drive it.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_agent = settings.metadata_user_agent
        self.fetch_timeout = settings.metadata_fetch_timeout
        self.head_timeout = settings.metadata_head_timeout
        self.max_body_bytes = settings.metadata_max_body_bytes
        self.max_redirects = settings.metadata_max_redirects
        self._transport = transport

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            headers={"User-Agent": self.user_agent},
            timeout=timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
        )

    async def fetch(self, url: str) -> FetchedDocument:
        """GET ``url`` and return its body as text.

        Raises:
            TransportFailureError: the host could not be reached.
            RemoteHttpError: the page answered with a non-2xx status.
            BodyReadError: the response body could not be read.
        """
        async with self._client(self.fetch_timeout) as client:
            try:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        logger.warning(
                            "Fetch of %s failed with status %s",
                            url,
                            response.status_code,
                        )
                        raise RemoteHttpError(
                            f"Failed to fetch URL: status {response.status_code}",
                            status_code=response.status_code,
                        )
                    body = await self._read_body(response)
                    document = FetchedDocument(
                        final_url=str(response.url),
                        status_code=response.status_code,
                        content_type=response.headers.get("content-type", ""),
                        raw_body=body.decode(
                            response.encoding or "utf-8", errors="replace"
                        ),
                    )
            except httpx.InvalidURL as exc:
                raise InvalidInputError(f"Invalid URL: {_describe(exc)}") from exc
            except httpx.RequestError as exc:
                logger.warning("Could not reach %s: %s", url, _describe(exc))
                raise TransportFailureError(
                    f"Could not reach {url}: {_describe(exc)}"
                ) from exc

        if not document.is_html:
            logger.info(
                "Non-HTML content type %r for %s", document.content_type, url
            )
        return document

    async def _read_body(self, response: httpx.Response) -> bytes:
        chunks: list[bytes] = []
        size = 0
        try:
            async for chunk in response.aiter_bytes():
                chunks.append(chunk)
                size += len(chunk)
                if size >= self.max_body_bytes:
                    logger.info(
                        "Truncated body of %s at %d bytes", response.url, size
                    )
                    break
        except (httpx.HTTPError, httpx.StreamError) as exc:
            logger.warning(
                "Could not read body of %s: %s", response.url, _describe(exc)
            )
            raise BodyReadError(
                f"Failed to read response body: {_describe(exc)}"
            ) from exc
        return b"".join(chunks)[: self.max_body_bytes]

    async def is_reachable(self, url: str) -> bool:
        """HEAD ``url``; only a 2xx answer counts as reachable."""
        async with self._client(self.head_timeout) as client:
            try:
                response = await client.head(url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                logger.info("Image check for %s failed: %s", url, _describe(exc))
                return False
        logger.debug("Image check for %s returned %s", url, response.status_code)
        return response.is_success
