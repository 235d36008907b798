"""Turn raw host responses into results or classified ``HostError``s.

A successful submission body follows a small line grammar::

    https://envs.sh/Ej-.txt
    X-Token: 3a1f...          (optional)
    X-Expires: 1739112927476  (optional)

The first token of the first non-blank line is the URL. Token and expiry are
normally sent as ``X-Token``/``X-Expires`` response headers; key-prefixed body
lines are accepted as a fallback, headers win when both are present.
"""

import logging
from http import HTTPStatus
from urllib.parse import urlparse

from envsh.errors import ErrorKind, HostError
from envsh.models.submission import HostResponse, ManagementResult, SubmissionResult
from envsh.services.timespec import format_display

logger = logging.getLogger(__name__)

TOKEN_KEY = "x-token"
EXPIRES_KEY = "x-expires"

MANAGEMENT_ACK = "Change accepted!"


def classify_status(status: int) -> ErrorKind:
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return ErrorKind.RATE_LIMITED
    if 400 <= status < 500:
        return ErrorKind.BAD_REQUEST
    if 500 <= status < 600:
        return ErrorKind.SERVER_ERROR
    return ErrorKind.UNRECOGNIZED_RESPONSE


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown status"


def _raise_for_status(response: HostResponse) -> None:
    if response.is_success:
        return
    text = response.body.strip() or _reason(response.status)
    raise HostError(
        classify_status(response.status),
        f"[{response.status}] {text}",
        status=response.status,
    )


def _parse_body(body: str) -> tuple[str | None, dict[str, str]]:
    """Split a body into its leading URL and any key-prefixed lines."""
    url = None
    meta: dict[str, str] = {}
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        if url is None:
            url = line.split()[0]
            continue
        key, sep, value = line.partition(":")
        if sep:
            meta[key.strip().lower()] = value.strip()
    return url, meta


def _is_url(candidate: str) -> bool:
    parsed = urlparse(candidate)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _expiry_display(raw: str | None, tz_name: str) -> str | None:
    if not raw:
        return None
    # inf, nan and out-of-range instants fail in int() or in datetime
    try:
        return format_display(int(float(raw)), tz_name)
    except (ValueError, OverflowError, OSError):
        logger.warning("Host sent an unreadable expiry value: %r", raw)
        return None


def interpret_submission(
    response: HostResponse,
    display_secret: bool,
    tz_name: str,
) -> SubmissionResult:
    _raise_for_status(response)

    url, meta = _parse_body(response.body)
    if url is None or not _is_url(url):
        raise HostError(
            ErrorKind.UNRECOGNIZED_RESPONSE,
            f"[{response.status}] unexpected response from host: {response.body.strip()!r}",
            status=response.status,
        )

    result = SubmissionResult(url=url)
    if display_secret:
        headers = {k.lower(): v for k, v in response.headers.items()}
        result.token = headers.get(TOKEN_KEY) or meta.get(TOKEN_KEY)
        result.expires_display = _expiry_display(
            headers.get(EXPIRES_KEY) or meta.get(EXPIRES_KEY), tz_name
        )
        if result.token is None:
            logger.info("Host returned no token for %s", url)
    return result


def interpret_management(response: HostResponse) -> ManagementResult:
    _raise_for_status(response)
    return ManagementResult(accepted=True, message=response.body.strip())
