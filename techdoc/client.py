r"""HTTP client for fetching technology-detail pages.

This module wraps the documentation service's JSON endpoints. It centralises
the base URL, timeouts, retry policy, and error handling, and hands the raw
bytes to :func:`techdoc.decode_technology_detail`. The client never retries a
decode failure: a malformed payload will not change on a second request.

Example
-------
>>> from techdoc.client import DocumentationClient
>>> client = DocumentationClient(timeout=5)
>>> client.page_url("/documentation/swiftui/view")
'https://developer.apple.com/tutorials/data/documentation/swiftui/view.json'
>>> detail = client.fetch_technology_detail("swiftui")  # doctest: +SKIP
>>> detail.metadata.title  # doctest: +SKIP
'SwiftUI'
"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._constants import (
    DEFAULT_API_BASE,
    DOCUMENTATION_SEGMENT,
    IDENTIFIER_PREFIX,
    USER_AGENT,
)
from .decode import decode_technology_detail
from .logging import get_logger

if typ.TYPE_CHECKING:
    from .decode import DecoderSettings
    from .model import TechnologyDetail

logger = get_logger("client")


class DocumentationFetchError(RuntimeError):
    """Raised when the documentation service returns an unexpected response."""


class DocumentationNotFoundError(DocumentationFetchError):
    """Raised when the requested page does not exist (HTTP 404)."""


class DocumentationClient:
    """Thin wrapper around the documentation JSON endpoints.

    The client is safe to reuse across threads when the provided session is
    thread-safe; decoding itself holds no shared state.
    """

    def __init__(
        self,
        *,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = 15.0,
        retries: int = 3,
    ) -> None:
        """Initialise the client with an optional preconfigured transport.

        Parameters
        ----------
        api_base : str, optional
            Base URL of the documentation data service. Defaults to
            ``DEFAULT_API_BASE``.
        session : requests.Session, optional
            Preconfigured session to reuse connections. When omitted, a new
            session is created with a retrying adapter mounted for HTTP(S).
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``15.0``.
        retries : int, optional
            Retry budget for connection errors and 5xx responses on the
            default session. Ignored when ``session`` is provided.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or _build_session(retries)
        self.timeout = timeout
        self._headers = {"Accept": "application/json", "User-Agent": USER_AGENT}

    def page_url(self, path: str) -> str:
        """Return the JSON endpoint URL for a documentation page path."""
        return f"{self._api_base}/{DOCUMENTATION_SEGMENT}/{normalize_page_path(path)}.json"

    def fetch(self, path: str) -> bytes:
        """Download the raw JSON bytes for ``path``.

        Parameters
        ----------
        path : str
            Page path such as ``"swiftui/view"``; ``/documentation/`` prefixes
            and ``.json`` suffixes are accepted.

        Returns
        -------
        bytes
            Undecoded response body.

        Raises
        ------
        DocumentationNotFoundError
            If the service responds with HTTP 404.
        DocumentationFetchError
            On transport failures or any other error status.
        """
        url = self.page_url(path)
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, headers=self._headers, timeout=self.timeout)
        except requests.RequestException as exc:
            msg = f"Failed to reach documentation page '{path}': {exc}"
            raise DocumentationFetchError(msg) from exc

        if response.status_code == HTTPStatus.NOT_FOUND:
            msg = f"Documentation page '{path}' was not found"
            raise DocumentationNotFoundError(msg)
        if response.status_code >= HTTPStatus.BAD_REQUEST:
            snippet = response.text[:200]
            logger.warning("documentation fetch for %s returned %s", url, response.status_code)
            msg = (
                f"Documentation lookup for '{path}' failed with "
                f"status {response.status_code}: {snippet}"
            )
            raise DocumentationFetchError(msg)
        return response.content

    def fetch_technology_detail(
        self, path: str, *, settings: DecoderSettings | None = None
    ) -> TechnologyDetail:
        """Fetch ``path`` and decode it into a :class:`TechnologyDetail`."""
        return decode_technology_detail(self.fetch(path), settings=settings)

    def close(self) -> None:
        self._session.close()


def _build_session(retries: int) -> requests.Session:
    """Return a session with a retrying adapter for idempotent requests."""
    session = requests.Session()
    retry = Retry(
        total=retries,
        read=retries,
        connect=retries,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def normalize_page_path(path: str) -> str:
    """Strip slashes, a leading ``documentation/`` segment, and ``.json``.

    >>> normalize_page_path("/documentation/SwiftUI/View.json")
    'SwiftUI/View'
    """
    normalized = path.strip().strip("/").removesuffix(".json")
    normalized = normalized.removeprefix(f"{DOCUMENTATION_SEGMENT}/")
    if not normalized or normalized == DOCUMENTATION_SEGMENT:
        msg = "Documentation path cannot be empty"
        raise ValueError(msg)
    return normalized


def identifier_to_path(identifier: str) -> str:
    """Return the page path addressed by a ``doc://`` identifier.

    >>> identifier_to_path("doc://com.apple.documentation/documentation/swiftui/view")
    'swiftui/view'
    """
    if not identifier.startswith(IDENTIFIER_PREFIX):
        msg = f"Not a documentation identifier: {identifier!r}"
        raise ValueError(msg)
    _bundle, _sep, remainder = identifier.removeprefix(IDENTIFIER_PREFIX).partition("/")
    return normalize_page_path(remainder)


__all__ = [
    "DocumentationClient",
    "DocumentationFetchError",
    "DocumentationNotFoundError",
    "identifier_to_path",
    "normalize_page_path",
]
