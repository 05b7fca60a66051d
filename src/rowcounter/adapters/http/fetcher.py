"""httpx adapter that retrieves report exports from the report server."""

from __future__ import annotations

import base64
import logging
import ssl
from urllib.parse import quote

import httpx

from rowcounter.core.errors import (
    ConfigError,
    FetchTimeoutError,
    RemoteError,
    TransientError,
)
from rowcounter.core.models import Credentials, Endpoint, ReportQuery

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 50.0
REPORT_PATH = "/rest/management/reports/create/"
VALID_PROTOCOLS = {"http", "https"}


def build_report_path(query: ReportQuery) -> str:
    """Build the report-creation path with its query string.

    Disabled filters are skipped silently; enabled filters with an empty
    value are skipped with a warning. Literal spaces are percent-encoded.
    """
    path = (
        REPORT_PATH
        + quote(query.report_name, safe="")
        + "?type=XML&format=XML+Export"
        + "&filter=tf:OffsetTimeframe?"
        + query.timeframe
    )
    for report_filter in query.filters:
        if not report_filter.enabled:
            continue
        if not report_filter.value:
            logger.warning(
                "%s filter entry is empty, continuing without it",
                report_filter.kind.name.replace("_", " ").title(),
            )
            continue
        path += report_filter.segment
    return path.replace(" ", "%20")


def basic_auth_header(creds: Credentials) -> str:
    """Return the ``Authorization`` value for basic authentication."""
    userpass = f"{creds.username}:{creds.password}".encode()
    return "Basic " + base64.b64encode(userpass).decode("ascii")


def check_protocol(protocol: str) -> str:
    """Return the lower-cased protocol, rejecting anything but http/https."""
    if protocol.lower() not in VALID_PROTOCOLS:
        raise ConfigError(f"Unsupported protocol: {protocol!r}", key="protocol")
    return protocol.lower()


def check_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigError(f"Invalid port: {port!r}", key="httpPort")
    return port


def _url_host(host: str) -> str:
    # IPv6 literals need brackets to be told apart from the port
    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


def build_url(endpoint: Endpoint, path: str) -> str:
    """Join endpoint and path, rejecting malformed protocol/host/port.

    Raises:
        ConfigError: If the endpoint cannot form a valid URL.
    """
    protocol = check_protocol(endpoint.protocol)
    port = check_port(endpoint.port)
    if not endpoint.host or any(c in endpoint.host for c in "/?#@ "):
        raise ConfigError(f"Invalid host: {endpoint.host!r}", key="host")
    url = f"{protocol}://{_url_host(endpoint.host)}:{port}{path}"
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"Malformed report URL {url!r}: {e}") from e
    return url


def insecure_ssl_context() -> ssl.SSLContext | bool:
    """Return an SSL context that skips certificate and hostname checks.

    The context is handed to a single client only. If it cannot be built,
    validation is left at the default (True) and a warning is logged.
    """
    try:
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    except (ssl.SSLError, ValueError) as e:
        logger.warning("Could not disable certificate validation, using default: %s", e)
        return True
    return ctx


def _describe_request_error(e: httpx.RequestError) -> str:
    """Build a descriptive message for httpx request errors.

    httpx timeouts often have an empty str(e), so fall back to the type name
    and include the chained cause when available.
    """
    msg = str(e) or type(e).__name__
    if e.__cause__ and str(e.__cause__):
        msg = f"{msg} (caused by {type(e.__cause__).__name__}: {e.__cause__})"
    return msg


class ReportFetcher:
    """Fetches one report export per call.

    A fresh client is opened and closed inside every fetch; nothing is kept
    between invocations.

    Args:
        timeout: Seconds allowed for connecting and reading (default 50).
        insecure: Skip certificate and hostname validation for this
            fetcher's connections only.
        transport: Optional httpx transport (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        insecure: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._insecure = insecure
        self._transport = transport

    def _create_client(self) -> httpx.AsyncClient:
        verify: ssl.SSLContext | bool = True
        if self._insecure:
            verify = insecure_ssl_context()
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            verify=verify,
            transport=self._transport,
        )

    async def fetch(self, query: ReportQuery, creds: Credentials, endpoint: Endpoint) -> bytes:
        """Retrieve the raw report document.

        Raises:
            ConfigError: Malformed protocol, host or port.
            FetchTimeoutError: The server did not answer in time.
            TransientError: Network or IO failure.
            RemoteError: Non-2xx response.
        """
        url = build_url(endpoint, build_report_path(query))
        logger.info("Fetching report from %s", url)
        headers = {"Authorization": basic_auth_header(creds)}

        async with self._create_client() as client:
            try:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
            except httpx.TimeoutException as e:
                raise FetchTimeoutError(
                    f"Report request timed out after {self._timeout:g}s: {_describe_request_error(e)}",
                    url=url,
                ) from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                raise RemoteError(
                    f"Report server returned {status}: {e.response.text[:500]}",
                    status_code=status,
                    url=url,
                ) from e
            except httpx.RequestError as e:
                raise TransientError(
                    f"Report request failed: {_describe_request_error(e)}",
                    url=url,
                ) from e

        logger.debug("Received %d bytes", len(response.content))
        return response.content
