"""HTTP transport: one multipart POST, one response."""

import logging

import httpx

from envsh.errors import TransportError
from envsh.models.submission import HostResponse, HttpRequest

logger = logging.getLogger(__name__)


class EnvsClient:
    def __init__(
        self,
        timeout: float,
        user_agent: str,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client = httpx.Client(
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport,
        )

    def send(self, request: HttpRequest) -> HostResponse:
        """Send ``request`` as multipart/form-data.

        Text fields are sent as file parts without a filename so httpx always
        encodes a multipart body, even when no file is attached.
        """
        parts: dict[str, tuple] = {
            name: (None, value.encode("utf-8")) for name, value in request.fields.items()
        }
        parts.update(request.files)

        logger.info("%s %s (%s)", request.method, request.url, ", ".join(parts))
        try:
            resp = self.client.request(request.method, request.url, files=parts)
        except httpx.TransportError as e:
            raise TransportError(f"request to {request.url} failed: {e}") from e

        logger.info("Host answered %d", resp.status_code)
        return HostResponse(
            status=resp.status_code,
            body=resp.text,
            headers={k.lower(): v for k, v in resp.headers.items()},
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "EnvsClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
