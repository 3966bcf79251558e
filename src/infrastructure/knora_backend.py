"""
HTTP client for a DSP/Knora API v2 server.

Implements the ResourceBackend capability interface on top of httpx. Every
failure (transport error, non-2xx answer, undecodable body) is raised as
UpstreamError carrying the server's error message when it sent one.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from domain.backend import ResourceBackend
from domain.errors import UpstreamError
from domain.list_models import ListNode, ListTree
from domain.ontology_models import Ontology
from domain.resource_models import RawResource
from infrastructure.knora_payloads import (
    parse_count,
    parse_list_node_v2,
    parse_list_response,
    parse_ontology,
    parse_resources,
)

logger = logging.getLogger(__name__)

ERROR_KEY = "knora-api:error"
IDENTITY_KINDS = ("email", "username", "iri")


def encode_iri(iri: str) -> str:
    """Percent-encode an IRI as a single URL path segment."""
    return quote(iri, safe="")


class KnoraApiBackend(ResourceBackend):
    """Resource API client over httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Server root (e.g., "http://localhost:3333")
            timeout: Default timeout for HTTP requests in seconds
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token: Optional[str] = None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/ld+json, application/json"},
        )
        logger.info(f"Resource API client created for {self.base_url}")

    async def __aenter__(self) -> "KnoraApiBackend":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def token(self) -> Optional[str]:
        return self._token

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = dict(extra or {})
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                content=content,
                headers=self._headers(headers),
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            payload = _error_payload(e.response)
            raise UpstreamError(
                f"{method} {path} failed with HTTP {e.response.status_code}: {payload}",
                status_code=e.response.status_code,
                payload=payload,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"{method} {path} failed: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"{method} {path} returned an undecodable body: {e}") from e

    # ========================================
    # Resources and search
    # ========================================

    async def get_resource(self, iri: str) -> RawResource:
        data = await self._request("GET", f"/v2/resources/{encode_iri(iri)}")
        resources = parse_resources(data)
        if not resources:
            raise UpstreamError(f"Resource {iri} not found", status_code=404, payload=data)
        return resources[0]

    async def search(self, query: str) -> List[RawResource]:
        data = await self._request(
            "POST",
            "/v2/searchextended",
            content=query,
            headers={"Content-Type": "application/sparql-query"},
        )
        resources = parse_resources(data)
        logger.debug(f"Search returned {len(resources)} resources")
        return resources

    async def search_count(self, query: str) -> int:
        data = await self._request(
            "POST",
            "/v2/searchextended/count",
            content=query,
            headers={"Content-Type": "application/sparql-query"},
        )
        return parse_count(data)

    # ========================================
    # Ontologies and lists
    # ========================================

    async def get_ontology(self, iri: str) -> Ontology:
        data = await self._request("GET", f"/v2/ontologies/allentities/{encode_iri(iri)}")
        ontology = parse_ontology(data, iri)
        logger.info(
            f"Fetched ontology {iri}: {len(ontology.classes)} classes, "
            f"{len(ontology.properties)} properties"
        )
        return ontology

    async def get_list_node(self, iri: str) -> ListNode:
        data = await self._request("GET", f"/v2/node/{encode_iri(iri)}")
        return parse_list_node_v2(data)

    async def get_list(self, iri: str) -> ListTree:
        data = await self._request("GET", f"/admin/lists/{encode_iri(iri)}")
        return parse_list_response(data)

    # ========================================
    # Authentication
    # ========================================

    async def login(self, identity_kind: str, identity: str, secret: str) -> str:
        if identity_kind not in IDENTITY_KINDS:
            raise ValueError(f"Unknown identity kind: {identity_kind}")
        data = await self._request(
            "POST",
            "/v2/authentication",
            json={identity_kind: identity, "password": secret},
        )
        token = data.get("token")
        if not token:
            raise UpstreamError("Login response without token", payload=data)
        self._token = token
        return token

    async def logout(self) -> str:
        data = await self._request("DELETE", "/v2/authentication")
        self._token = None
        return data.get("message", "")


def _error_payload(response: httpx.Response) -> Any:
    """Extract the API's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and ERROR_KEY in body:
        return body[ERROR_KEY]
    return body
