import base64
from typing import Any, List, Optional

import httpx

from .models import ConnectionSpec, FetchOptions, RawRecord, DEFAULT_USER_AGENT
from .utils.logging import get_logger

logger = get_logger(__name__)

RESPONSES_URL = "https://{host}/en/m/{mission}/odata/v1/Responses-{form_id}"


class FetchError(Exception):
    """Raised when the NEMO responses feed cannot be retrieved.

    Carries the target host, whether any HTTP response came back and its
    status code. Credentials are never part of the message.
    """

    def __init__(
        self,
        host: str,
        reason: str,
        response_received: bool = False,
        status_code: Optional[int] = None,
    ):
        self.host = host
        self.reason = reason
        self.response_received = response_received
        self.status_code = status_code

        message = f"Failed to fetch responses from {host}: {reason}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_fetch_options(spec: ConnectionSpec, user_agent: str = DEFAULT_USER_AGENT) -> FetchOptions:
    """Build the OData responses URL and headers for a connection.

    Credentials travel only in the ``Authorization`` header. Mission and form
    id are interpolated as-is and must already be URL-safe.
    """
    url = RESPONSES_URL.format(host=spec.host, mission=spec.mission, form_id=spec.form_id)
    return FetchOptions(
        url=url,
        headers={
            'Authorization': basic_auth_header(spec.username, spec.password),
            'Accept': 'application/json',
            'User-Agent': user_agent,
        },
    )


class NemoClient:
    def __init__(self, timeout: Optional[float] = 30.0):
        self.timeout = timeout

    async def __aenter__(self):
        self.session = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.session.aclose()

    async def fetch_responses(self, options: FetchOptions, host: str) -> List[RawRecord]:
        """GET the responses feed once and return its ``value`` array."""
        try:
            response = await self.session.get(options.url, headers=options.headers)
        except httpx.RequestError as exc:
            logger.error(
                "NEMO request failed before a response was received",
                extra={'target_host': host, 'error_type': type(exc).__name__}
            )
            raise FetchError(host, f"transport error ({type(exc).__name__})") from None
        except httpx.InvalidURL:
            logger.error("NEMO target URL is invalid", extra={'target_host': host})
            raise FetchError(host, "invalid target URL") from None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError:
            logger.error(
                "NEMO returned an error status",
                extra={'target_host': host, 'status_code': response.status_code}
            )
            raise FetchError(
                host,
                "upstream returned an error status",
                response_received=True,
                status_code=response.status_code,
            ) from None

        try:
            payload: Any = response.json()
        except ValueError:
            raise FetchError(
                host,
                "response body is not valid JSON",
                response_received=True,
                status_code=response.status_code,
            ) from None

        records = payload.get('value') if isinstance(payload, dict) else None
        if not isinstance(records, list):
            keys: List[str] = list(payload.keys()) if isinstance(payload, dict) else []
            logger.warning(f"Unexpected response format: {keys}", extra={'target_host': host})
            raise FetchError(
                host,
                "response body has no 'value' array",
                response_received=True,
                status_code=response.status_code,
            )

        logger.info(f"Retrieved {len(records)} responses", extra={'target_host': host})
        return records
