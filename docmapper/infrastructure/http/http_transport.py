"""HTTP transport: implements the Transport interface over the document service API.

Every call is a blocking form POST to ``{base_url}/{verb}/{api_key}/{collection}``
carrying the JSON-encoded body in the ``json`` form field and the API token
in the ``X-Token`` header.
"""

import json
import logging
import zlib
from typing import Any

import httpx
from pydantic import ValidationError

from docmapper.application.interfaces import Transport
from docmapper.application.schemas import TransportResponse

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """Infrastructure adapter: connects to the document service over HTTP.

    Never raises on remote failures: network errors, HTTP error statuses and
    undecodable bodies all come back as an unsuccessful ``TransportResponse``
    carrying a message.
    """

    def __init__(
        self,
        api_key: str,
        api_token: str,
        base_url: str = "https://api.plexxer.com",
        *,
        version: str | None = None,
        dev_mode: bool = False,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        if not api_key or not api_token:
            raise ValueError("api_key and api_token are required for the HTTP transport")

        self._api_key = api_key
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._version = version
        self._dev_mode = dev_mode
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        return {"X-Token": self._api_token}

    def _get_params(self) -> dict[str, str]:
        if self._dev_mode:
            return {"dev": "1"}
        if self._version:
            return {"v": self._version}
        return {}

    def _url(self, verb: str, collection: str) -> str:
        return f"{self._base_url}/{verb}/{self._api_key}/{collection}"

    # ── Transport ────────────────────────────────────────────────────

    def create(self, type_name: str, payload: dict[str, Any]) -> TransportResponse:
        return self.request("create", type_name, payload)

    def read(
        self,
        type_name: str,
        filter: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
    ) -> TransportResponse:
        body = dict(filter or {})
        if query:
            body["query"] = query
        gzip = bool(query) and query.get("gzip") is True
        return self.request("read", type_name, body, gzip=gzip)

    def update(
        self, type_name: str, filter: dict[str, Any], payload: dict[str, Any]
    ) -> TransportResponse:
        body = dict(filter)
        if payload:
            body[":set"] = payload
        return self.request("update", type_name, body)

    def delete(self, type_name: str, filter: dict[str, Any]) -> TransportResponse:
        return self.request("delete", type_name, dict(filter))

    # ── Wire ─────────────────────────────────────────────────────────

    def request(
        self, verb: str, collection: str, body: dict[str, Any], *, gzip: bool = False
    ) -> TransportResponse:
        """POST ``body`` for ``verb`` on ``collection`` and parse the response envelope."""
        url = self._url(verb, collection)
        client = self._get_client()
        should_close = self._http_client is None

        try:
            logger.debug("%s %s", verb.upper(), collection)
            response = client.post(
                url,
                headers=self._get_headers(),
                params=self._get_params(),
                data={"json": json.dumps(body, default=str)},
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", verb.upper(), collection, e)
            return TransportResponse.failure(f"{type(e).__name__}: {e}")
        finally:
            if should_close:
                client.close()

        return self._parse_response(verb, collection, response, gzip=gzip)

    def _get_client(self) -> httpx.Client:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.Client(timeout=self._timeout)

    def _parse_response(
        self, verb: str, collection: str, response: httpx.Response, *, gzip: bool = False
    ) -> TransportResponse:
        """Decode the response body into a TransportResponse."""
        content = response.content
        if gzip:
            try:
                content = zlib.decompress(content, -zlib.MAX_WBITS)
            except zlib.error as e:
                logger.warning("Could not inflate %s %s response: %s", verb.upper(), collection, e)
                return TransportResponse.failure(f"Invalid compressed response: {e}")

        try:
            data = json.loads(content)
        except ValueError:
            logger.warning(
                "%s %s returned a non-JSON body (HTTP %d)",
                verb.upper(),
                collection,
                response.status_code,
            )
            return TransportResponse.failure(
                f"HTTP {response.status_code}: {response.text[:200]}"
            )

        if not isinstance(data, dict):
            return TransportResponse.failure(f"HTTP {response.status_code}: unexpected response body")

        try:
            parsed = TransportResponse.model_validate(data)
        except ValidationError as e:
            logger.warning("%s %s returned a malformed envelope: %s", verb.upper(), collection, e)
            return TransportResponse.failure(f"Malformed response: {e}")

        if response.status_code >= 400 and parsed.success:
            parsed.success = False
        if not parsed.success and parsed.message is None and response.status_code >= 400:
            parsed.message = f"HTTP {response.status_code}"

        return parsed
