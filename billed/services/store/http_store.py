"""
HTTP Remote Store Implementation

Talks to the portal REST API with httpx:

    POST  /auth/login          sign in, returns {"jwt": ...}
    POST  /users               create an account
    GET   /bills               list bills
    POST  /bills               multipart upload, returns {"fileUrl", "key"}
    PATCH /bills/{selector}    replace a bill's metadata

Bodies are sent exactly as the flows serialized them. Authorized calls
carry the token of the signed-in identity as a Bearer header.

TRADEOFFS:
- No retries here; a failed call is reported to the flow that made it
- No timeout unless one is configured
"""

from typing import Any, Mapping, Optional
from urllib.parse import quote

import httpx

from billed.config import StoreSettings, get_settings
from billed.models.bill import ProofFile
from billed.services.session import SessionStoreInterface, read_identity
from billed.services.store.interface import (
    BillsResourceInterface,
    RemoteStoreInterface,
    StoreRejectedError,
    StoreResponseError,
    StoreTransportError,
    UsersResourceInterface,
)


class PortalApiClient:
    """
    Low-level portal API client.

    Owns the httpx client and turns HTTP outcomes into store results or
    store exceptions.
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        session_store: Optional[SessionStoreInterface] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings().store
        self._session_store = session_store
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    def _headers(self, json_body: bool, authorize: bool) -> dict[str, str]:
        headers = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        if authorize:
            identity = read_identity(self._session_store)
            if identity and identity.token:
                headers["Authorization"] = f"Bearer {identity.token}"
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        content: Optional[str] = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[dict[str, tuple]] = None,
        authorize: bool = True,
    ) -> Any:
        """
        Send one request and decode its JSON answer.

        Raises:
            StoreTransportError: Connection, DNS or timeout failure
            StoreRejectedError: Non-2xx answer
            StoreResponseError: Answer body is not JSON
        """
        headers = self._headers(json_body=files is None, authorize=authorize)
        try:
            response = await self._get_client().request(
                method,
                url,
                content=content.encode("utf-8") if content is not None else None,
                data=data,
                files=files,
                headers=headers,
            )
        except httpx.TransportError as e:
            raise StoreTransportError(
                f"Could not reach {self.base_url}{url}: {e}"
            ) from e

        return self._json_or_raise(response)

    @staticmethod
    def _json_or_raise(response: httpx.Response) -> Any:
        if response.is_error:
            message = f"HTTP {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
            raise StoreRejectedError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise StoreResponseError(
                f"Invalid JSON from {response.request.url}: {e}"
            ) from e

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class HttpBillsResource(BillsResourceInterface):
    """`/bills` collection."""

    def __init__(self, api: PortalApiClient):
        self._api = api

    async def list(self):
        records = await self._api.request("GET", "/bills")
        # Entries are passed through as-is; the bill list reports bad ones
        if not isinstance(records, (list, tuple)):
            raise StoreResponseError("Bill list is not an array")
        return list(records)

    async def create(self, payload: Mapping[str, Any]) -> Mapping[str, Any]:
        files = {}
        data = {}
        for name, value in payload.items():
            if isinstance(value, ProofFile):
                files[name] = (value.file_name, value.content, value.content_type)
            elif value is not None:
                data[name] = str(value)

        receipt = await self._api.request("POST", "/bills", data=data, files=files)
        if not isinstance(receipt, Mapping):
            raise StoreResponseError("Upload answer is not an object")
        return receipt

    async def update(self, data: str, selector: str) -> Any:
        return await self._api.request(
            "PATCH",
            f"/bills/{quote(str(selector), safe='')}",
            content=data,
        )


class HttpUsersResource(UsersResourceInterface):
    """`/users` collection."""

    def __init__(self, api: PortalApiClient):
        self._api = api

    async def create(self, data: str) -> Any:
        return await self._api.request("POST", "/users", content=data)


class HttpRemoteStore(RemoteStoreInterface):
    """
    Remote store backed by the portal REST API.

    Usage:
        store = HttpRemoteStore(session_store=session)
        bills = await store.bills().list()
        await store.aclose()
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        session_store: Optional[SessionStoreInterface] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api = PortalApiClient(
            settings=settings,
            session_store=session_store,
            transport=transport,
        )

    def bills(self) -> HttpBillsResource:
        return HttpBillsResource(self._api)

    def users(self) -> HttpUsersResource:
        return HttpUsersResource(self._api)

    async def login(self, credentials: str) -> Mapping[str, Any]:
        # Signing in never sends a previous token
        answer = await self._api.request(
            "POST",
            "/auth/login",
            content=credentials,
            authorize=False,
        )
        if not isinstance(answer, Mapping):
            raise StoreResponseError("Login answer is not an object")
        return answer

    async def aclose(self) -> None:
        await self._api.aclose()
