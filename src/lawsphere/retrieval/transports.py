"""Write transports for the Pinecone backend.

One write interface, interchangeable implementations:

* :class:`SdkUpsertTransport` — through the Pinecone client library.
* :class:`RestUpsertTransport` — explicit JSON over HTTPS to the
  data-plane host (``POST /vectors/upsert`` with an ``Api-Key`` header).
* :class:`FallbackUpsertTransport` — tries a primary transport and, when
  it rejects a batch, re-sends the same batch through a fallback.

Both concrete transports produce the same durable effect: the records are
written under their ids, overwriting existing ones.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import requests

from lawsphere.errors import BatchWriteError
from lawsphere.retrieval.models import Record

logger = logging.getLogger(__name__)

TRANSPORT_MODES = ("sdk", "rest", "auto")


class UpsertTransport(ABC):
    """Strategy for writing one batch of records to a namespace."""

    name: str = "base"

    @abstractmethod
    def upsert(self, records: list[Record], namespace: str) -> int:
        """Write *records* and return the upserted count.

        Raises
        ------
        BatchWriteError
            When the batch is rejected or the transport fails.
        """
        ...


class SdkUpsertTransport(UpsertTransport):
    """Write through ``pinecone.Index.upsert``.

    Parameters
    ----------
    index_provider:
        Zero-argument callable returning the SDK ``Index`` handle, so the
        endpoint is resolved lazily and shared with the store.
    timeout:
        Per-request timeout in seconds, passed to the client as
        ``_request_timeout``.
    """

    name = "sdk"

    def __init__(self, index_provider: Callable[[], Any], *, timeout: float = 30.0) -> None:
        self._index_provider = index_provider
        self._timeout = timeout

    def upsert(self, records: list[Record], namespace: str) -> int:
        index = self._index_provider()
        try:
            response = index.upsert(
                vectors=[r.to_wire() for r in records],
                namespace=namespace,
                _request_timeout=self._timeout,
            )
        except Exception as exc:
            raise BatchWriteError(
                f"Pinecone client rejected batch: {exc}",
                record_ids=[r.id for r in records],
                details={"transport": self.name},
            ) from exc
        return int(getattr(response, "upserted_count", None) or len(records))


class RestUpsertTransport(UpsertTransport):
    """Write with a raw ``POST https://<host>/vectors/upsert``.

    Parameters
    ----------
    host_provider:
        Zero-argument callable returning the data-plane host.
    api_key:
        Sent as the ``Api-Key`` header.
    api_version:
        Sent as ``X-Pinecone-API-Version``.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional ``requests.Session`` (connection reuse, tests).
    """

    name = "rest"

    def __init__(
        self,
        host_provider: Callable[[], str],
        api_key: str,
        *,
        api_version: str = "2025-01",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._host_provider = host_provider
        self._api_key = api_key
        self._api_version = api_version
        self._timeout = timeout
        self._session = session or requests.Session()

    def _url(self) -> str:
        host = self._host_provider().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return f"{host}/vectors/upsert"

    def upsert(self, records: list[Record], namespace: str) -> int:
        ids = [r.id for r in records]
        payload = {"vectors": [r.to_wire() for r in records], "namespace": namespace}
        headers = {
            "Api-Key": self._api_key,
            "Content-Type": "application/json",
            "X-Pinecone-API-Version": self._api_version,
        }
        try:
            resp = self._session.post(self._url(), json=payload, headers=headers, timeout=self._timeout)
        except requests.RequestException as exc:
            raise BatchWriteError(
                f"REST upsert failed: {exc}", record_ids=ids, details={"transport": self.name}
            ) from exc

        if not resp.ok:
            raise BatchWriteError(
                f"REST upsert returned HTTP {resp.status_code}",
                record_ids=ids,
                details={"transport": self.name, "status": resp.status_code, "body": resp.text[:500]},
            )
        try:
            body = resp.json()
        except ValueError:
            body = {}
        return int(body.get("upsertedCount", len(records)))


class FallbackUpsertTransport(UpsertTransport):
    """Send through *primary*; on :class:`BatchWriteError` retry via *fallback*."""

    name = "auto"

    def __init__(self, primary: UpsertTransport, fallback: UpsertTransport) -> None:
        self.primary = primary
        self.fallback = fallback

    def upsert(self, records: list[Record], namespace: str) -> int:
        try:
            return self.primary.upsert(records, namespace)
        except BatchWriteError as exc:
            logger.warning(
                "%s transport rejected %d records (%s); retrying via %s",
                self.primary.name,
                len(records),
                exc.message,
                self.fallback.name,
            )
        return self.fallback.upsert(records, namespace)


def build_transport(
    mode: str,
    *,
    index_provider: Callable[[], Any],
    host_provider: Callable[[], str],
    api_key: str,
    api_version: str = "2025-01",
    timeout: float = 30.0,
    session: requests.Session | None = None,
) -> UpsertTransport:
    """Return the transport for *mode* (``"sdk"``, ``"rest"`` or ``"auto"``)."""
    if mode not in TRANSPORT_MODES:
        raise ValueError(f"Unsupported upsert transport {mode!r}. Choose from: {', '.join(TRANSPORT_MODES)}.")

    sdk = SdkUpsertTransport(index_provider, timeout=timeout)
    if mode == "sdk":
        return sdk
    rest = RestUpsertTransport(
        host_provider, api_key, api_version=api_version, timeout=timeout, session=session
    )
    if mode == "rest":
        return rest
    return FallbackUpsertTransport(sdk, rest)
