"""Pinecone implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
import threading
from typing import Any

import requests
from pinecone import Pinecone

from lawsphere.config import settings
from lawsphere.errors import EndpointResolutionError, RetrievalError
from lawsphere.retrieval.base import VectorStoreBase
from lawsphere.retrieval.models import Match, Record
from lawsphere.retrieval.transports import UpsertTransport, build_transport

logger = logging.getLogger(__name__)

# index name -> data-plane host, shared by every store in the process.
_ENDPOINTS: dict[str, str] = {}
_ENDPOINTS_LOCK = threading.Lock()


def clear_endpoint_cache() -> None:
    """Forget every resolved host (tests, credential rotation)."""
    with _ENDPOINTS_LOCK:
        _ENDPOINTS.clear()


class PineconeVectorStore(VectorStoreBase):
    """Pinecone-backed vector store.

    The index host is looked up on the control plane
    (``GET /indexes/<name>``) once per process and cached.  Queries go
    through the client library; writes go through an
    :class:`~lawsphere.retrieval.transports.UpsertTransport` chosen by
    *transport* (``"sdk"``, ``"rest"`` or ``"auto"``).  Every network call
    is bounded by *timeout*.

    Parameters
    ----------
    index_name:
        Name of the Pinecone index.
    namespace:
        Default namespace for reads and writes.
    api_key:
        Pinecone API key.
    transport:
        Write strategy mode, or a ready-made ``UpsertTransport``.
    dimension:
        Expected vector dimension.
    timeout:
        Per-request timeout in seconds.
    controller_url:
        Base URL of the control plane.
    client:
        Pre-built ``Pinecone`` client (tests).
    session:
        ``requests.Session`` for host lookup and the REST transport.
    """

    def __init__(
        self,
        index_name: str = settings.pinecone_index,
        *,
        namespace: str = settings.pinecone_namespace,
        api_key: str = settings.pinecone_api_key,
        transport: str | UpsertTransport = settings.upsert_transport,
        dimension: int | None = settings.embedding_dimension,
        timeout: float = settings.request_timeout,
        api_version: str = settings.pinecone_api_version,
        controller_url: str = settings.pinecone_controller_url,
        client: Any = None,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(namespace, dimension)
        self.index_name = index_name
        self._api_key = api_key
        self._api_version = api_version
        self._controller_url = controller_url.rstrip("/")
        self._timeout = timeout
        self._client = client
        self._session = session or requests.Session()
        self._index: Any = None
        self._lock = threading.Lock()
        if isinstance(transport, UpsertTransport):
            self._transport = transport
        else:
            self._transport = build_transport(
                transport,
                index_provider=self._get_index,
                host_provider=self.resolve_endpoint,
                api_key=api_key,
                api_version=api_version,
                timeout=timeout,
                session=self._session,
            )

    @property
    def transport(self) -> UpsertTransport:
        return self._transport

    # -- connection -----------------------------------------------------------

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = Pinecone(api_key=self._api_key)
        return self._client

    def resolve_endpoint(self) -> str:
        """Return the index's data-plane host, resolving it on first call.

        Raises
        ------
        EndpointResolutionError
            If the index does not exist or the control plane is unreachable.
        """
        with _ENDPOINTS_LOCK:
            host = _ENDPOINTS.get(self.index_name)
            if host is not None:
                return host
            host = self._describe_host()
            _ENDPOINTS[self.index_name] = host
            logger.info("Resolved index %s -> %s", self.index_name, host)
            return host

    def _describe_host(self) -> str:
        headers = {"Api-Key": self._api_key, "X-Pinecone-API-Version": self._api_version}
        url = f"{self._controller_url}/indexes/{self.index_name}"
        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise EndpointResolutionError(self.index_name, {"reason": str(exc)}) from exc

        if resp.status_code == 404:
            raise EndpointResolutionError(self.index_name, {"reason": "index not found"})
        if not resp.ok:
            raise EndpointResolutionError(
                self.index_name, {"status": resp.status_code, "body": resp.text[:500]}
            )
        try:
            host = resp.json().get("host")
        except ValueError:
            host = None
        if not host:
            raise EndpointResolutionError(self.index_name, {"reason": "index has no host"})
        return host

    def connect(self) -> None:
        self.resolve_endpoint()

    def _get_index(self) -> Any:
        if self._index is None:
            host = self.resolve_endpoint()
            with self._lock:
                if self._index is None:
                    self._index = self._get_client().Index(host=host)
        return self._index

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, records: list[Record], *, namespace: str | None = None) -> int:
        if not records:
            return 0
        self.validate_records(records)
        count = self._transport.upsert(records, self._ns(namespace))
        logger.info("Upserted %d records via %s transport", count, self._transport.name)
        return count

    def query(
        self,
        vector: list[float],
        *,
        top_k: int = 5,
        namespace: str | None = None,
        include_metadata: bool = True,
    ) -> list[Match]:
        index = self._get_index()
        try:
            response = index.query(
                vector=vector,
                top_k=top_k,
                namespace=self._ns(namespace),
                include_metadata=include_metadata,
                _request_timeout=self._timeout,
            )
        except Exception as exc:
            raise RetrievalError(f"Pinecone query failed: {exc}", {"index": self.index_name}) from exc

        matches = [
            Match(id=m.id, score=float(m.score or 0.0), metadata=dict(m.metadata or {}))
            for m in (getattr(response, "matches", None) or [])
        ]
        matches.sort(key=lambda m: m.score, reverse=True)
        return matches[:top_k]

    def health_check(self) -> bool:
        try:
            self._get_index().describe_index_stats(_request_timeout=self._timeout)
            return True
        except Exception:
            logger.warning("Pinecone health-check failed", exc_info=True)
            return False

    def delete(self, ids: list[str], *, namespace: str | None = None) -> None:
        self._get_index().delete(ids=ids, namespace=self._ns(namespace), _request_timeout=self._timeout)
