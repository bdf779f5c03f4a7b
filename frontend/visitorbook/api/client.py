"""
VisitorBook Frontend: API Client
==================================

What:  Thin async wrapper over the four backend endpoints.
How:   One shared httpx.AsyncClient (connection pool) bound to the base URL.
       Each method maps 1:1 to an HTTP method + path and parses the JSON
       body into the matching schema.

    get_visitor_count()        GET  /api/visitors
    increment_visitor_count()  POST /api/visitors
    list_messages()            GET  /api/messages
    create_message(form)       POST /api/messages

No retries, no caching, no auth. Every failure (transport error, timeout,
non-2xx status, unreadable body) surfaces as TransportError.
"""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from visitorbook.config import ClientSettings
from visitorbook.exceptions import TransportError
from visitorbook.schemas import Message, MessageFormData, VisitorCount

logger = logging.getLogger(__name__)

_message_list = TypeAdapter(List[Message])


class ApiClient:
    """
    Async client for the VisitorBook API.

    Usage:
        async with ApiClient("http://localhost:3001") as client:
            count = await client.increment_visitor_count()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ApiClient":
        return cls(settings.api_url, timeout=settings.request_timeout)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def get_visitor_count(self) -> VisitorCount:
        data = await self._request("GET", "/api/visitors")
        return self._parse(VisitorCount.model_validate, data, "GET", "/api/visitors")

    async def increment_visitor_count(self) -> VisitorCount:
        data = await self._request("POST", "/api/visitors")
        return self._parse(VisitorCount.model_validate, data, "POST", "/api/visitors")

    async def list_messages(self) -> List[Message]:
        data = await self._request("GET", "/api/messages")
        return self._parse(_message_list.validate_python, data, "GET", "/api/messages")

    async def create_message(self, form: MessageFormData) -> Message:
        data = await self._request("POST", "/api/messages", json=form.model_dump())
        return self._parse(Message.model_validate, data, "POST", "/api/messages")

    # ── Internals ─────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        """
        Perform one HTTP call and return the decoded JSON body.

        Raises:
            TransportError: no response, non-2xx response, or non-JSON body
        """
        context = {"method": method, "path": path}
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, str(e))
            raise TransportError(
                message=f"Could not reach the VisitorBook API ({type(e).__name__})",
                context={**context, "error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise TransportError(
                message=self._error_message(response),
                status_code=response.status_code,
                context=context,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                message="The VisitorBook API returned an unreadable response",
                status_code=response.status_code,
                context=context,
            ) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        # Backend error envelope: {"error": ..., "message": ..., "request_id": ...}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return f"Request failed with status {response.status_code}"

    @staticmethod
    def _parse(parser, data: Any, method: str, path: str):
        try:
            return parser(data)
        except SchemaValidationError as e:
            raise TransportError(
                message="The VisitorBook API returned an unexpected response",
                context={"method": method, "path": path, "errors": e.error_count()},
            ) from e
