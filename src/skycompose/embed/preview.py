"""Link-preview cards from Open Graph metadata.

The page is fetched once, every ``<meta property="og:*">`` tag is
collected, and ``og:image`` (when present) is fetched and uploaded as the
card thumbnail.  Page fetch, thumbnail fetch and thumbnail upload run
strictly one after the other, and a failure in any of them fails the
whole preview.
"""

from __future__ import annotations

from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from skycompose.config import ComposerConfig
from skycompose.errors import SkyComposeNetworkFetchError
from skycompose.image.upload import BlobStore, upload_blob
from skycompose.models import ExternalCard
from skycompose.observability import MetricsHook, get_logger
from skycompose.observability.metrics import resolve_metrics

log = get_logger("skycompose.preview")


def build_http_client(config: ComposerConfig) -> httpx.AsyncClient:
    """Create the HTTP client used for page and thumbnail fetches."""
    return httpx.AsyncClient(
        headers={"User-Agent": config.user_agent},
        timeout=httpx.Timeout(config.fetch_timeout_seconds),
        proxy=config.http_proxy,
        follow_redirects=True,
    )


def extract_og_tags(html: str) -> dict[str, str]:
    """Return every ``og:*`` meta property in *html*.

    When a property appears more than once the first occurrence wins.
    """
    soup = BeautifulSoup(html, "html.parser")
    tags: dict[str, str] = {}
    for meta in soup.find_all("meta", attrs={"property": True}):
        prop = meta.get("property", "")
        content = meta.get("content")
        if prop.startswith("og:") and content is not None and prop not in tags:
            tags[prop] = content.strip()
    return tags


class LinkPreviewFetcher:
    """Build :class:`ExternalCard` values for links.

    Parameters
    ----------
    http:
        HTTP collaborator.  Redirects should be followed.
    store:
        Remote upload collaborator used for the thumbnail.
    metrics:
        Optional metrics hook.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        store: BlobStore,
        metrics: MetricsHook | None = None,
    ) -> None:
        self._http = http
        self._store = store
        self._metrics = resolve_metrics(metrics)

    async def fetch_preview(self, uri: str) -> ExternalCard:
        """Fetch *uri* and build its preview card.

        Raises
        ------
        SkyComposeNetworkFetchError
            If the page or its ``og:image`` cannot be fetched.
        SkyComposeUploadError
            If the thumbnail upload fails.
        """
        response = await self._get(uri)
        try:
            html = response.text
        except (UnicodeDecodeError, LookupError) as exc:
            raise SkyComposeNetworkFetchError(
                message=f"Cannot decode page {uri}: {exc}",
                context={"url": uri},
                cause=exc,
            ) from exc

        og_tags = extract_og_tags(html)
        log.debug(
            "Open Graph tags extracted",
            extra={"extra_fields": {"op": "fetch_preview", "url": uri, "tags": sorted(og_tags)}},
        )

        thumb = None
        image_url = og_tags.get("og:image")
        if image_url:  # blank content counts as absent
            image_url = urljoin(str(response.url), image_url)
            image_response = await self._get(image_url)
            uploaded = await upload_blob(self._store, image_response.content, self._metrics)
            thumb = uploaded.blob_ref

        return ExternalCard(
            uri=uri,
            title=og_tags.get("og:title", ""),
            description=og_tags.get("og:description", ""),
            thumb=thumb,
        )

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._metrics.increment("skycompose.preview_fetch_total", tags={"status": "error"})
            raise SkyComposeNetworkFetchError(
                message=f"Fetching {url} returned HTTP {exc.response.status_code}",
                context={"url": url, "status_code": exc.response.status_code},
                cause=exc,
            ) from exc
        except httpx.HTTPError as exc:
            self._metrics.increment("skycompose.preview_fetch_total", tags={"status": "error"})
            raise SkyComposeNetworkFetchError(
                message=f"Fetching {url} failed: {exc}",
                context={"url": url},
                cause=exc,
            ) from exc
        self._metrics.increment("skycompose.preview_fetch_total", tags={"status": "ok"})
        return response
