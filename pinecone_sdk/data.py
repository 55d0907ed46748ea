"""
Data-plane client: vector operations against one index over gRPC.
"""
import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional, Sequence, Tuple
from urllib.parse import urlsplit

import grpc  # type: ignore
import grpc.aio
from pydantic import ValidationError  # type: ignore

from . import conversions
from . import models
from ._grpc import db_data_pb2
from ._grpc import db_data_pb2_grpc
from .config import ClientConfig
from .exceptions import (
    TRANSPORT_GRPC_CODES,
    PineconeException,
    PineconeSerializationError,
    PineconeStatusError,
    PineconeTransportError,
)
from .filters import FilterLike
from .models import NamespaceLike, namespace_name

logger = logging.getLogger(__name__)

DEFAULT_PORT = 443


def parse_index_host(host: str) -> Tuple[str, bool]:
    """
    Returns the ``host:port`` target and whether the channel should use TLS.

    ``https://`` is assumed when the host has no scheme and port 443 when it
    has no port. ``http://`` hosts are reached over an insecure channel.
    """
    raw = host.strip()
    if "://" not in raw:
        raw = f"https://{raw}"
    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise PineconeTransportError(f"Invalid index host: {host!r}")
    secure = parts.scheme == "https"
    port = parts.port or DEFAULT_PORT
    return f"{parts.hostname}:{port}", secure


class IndexClient:
    """
    The asynchronous client for one index's data plane.

    Holds only the channel, the stub and immutable settings, so one instance
    can serve many concurrent tasks. Every namespace argument accepts a
    ``Namespace``, a plain string or ``None`` for the default namespace.
    """
    def __init__(
        self,
        host: str,
        channel: grpc.aio.Channel,
        stub: db_data_pb2_grpc.VectorServiceStub,
        api_key: str,
        timeout: Optional[float] = None,
    ):
        self.host = host
        self.timeout = timeout
        self._channel = channel
        self._stub = stub
        self._metadata = (("api-key", api_key),)

    async def close(self) -> None:
        if self._channel is not None:
            await self._channel.close()
            self._channel = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # --- Call helper ---
    async def _execute(self, grpc_call: Callable[..., Awaitable], operation_name: str, request) -> Any:
        """
        Executes a gRPC call and maps failures onto the SDK's exceptions.
        """
        logger.debug("%s on %s", operation_name, self.host)
        try:
            return await grpc_call(request, metadata=self._metadata, timeout=self.timeout)
        except grpc.aio.AioRpcError as e:
            if e.code() in TRANSPORT_GRPC_CODES:
                raise PineconeTransportError(f"Failed to {operation_name}: {e.details()}", cause=e) from e
            raise PineconeStatusError.from_grpc_error(operation_name, e) from e

    @staticmethod
    def _convert(converter: Callable[[Any], Any], response, operation_name: str) -> Any:
        try:
            return converter(response)
        except (ValidationError, TypeError, ValueError) as e:
            raise PineconeSerializationError(f"Malformed response to {operation_name}: {e}") from e

    # --- Vector Methods ---
    async def upsert(
        self,
        vectors: Sequence[models.Vector],
        namespace: NamespaceLike = None,
    ) -> models.UpsertResponse:
        """Writes ``vectors`` in a single request, replacing any with the same id."""
        request = conversions.build_upsert_request(vectors, namespace_name(namespace))
        response = await self._execute(self._stub.Upsert, "upsert vectors", request)
        return self._convert(conversions.grpc_to_pydantic_upsert_response, response, "upsert vectors")

    async def query_by_id(
        self,
        id: str,
        top_k: int,
        namespace: NamespaceLike = None,
        filter: Optional[FilterLike] = None,
        include_values: bool = False,
        include_metadata: bool = False,
    ) -> models.QueryResponse:
        request = conversions.build_query_request(
            top_k,
            namespace_name(namespace),
            id=id,
            filter=filter,
            include_values=include_values,
            include_metadata=include_metadata,
        )
        response = await self._execute(self._stub.Query, f"query by id '{id}'", request)
        return self._convert(conversions.grpc_to_pydantic_query_response, response, "query")

    async def query_by_value(
        self,
        values: Sequence[float],
        top_k: int,
        sparse_values: Optional[models.SparseValues] = None,
        namespace: NamespaceLike = None,
        filter: Optional[FilterLike] = None,
        include_values: bool = False,
        include_metadata: bool = False,
    ) -> models.QueryResponse:
        """
        Finds the ``top_k`` vectors nearest to ``values``.

        Matches come back in the order the server returns them, highest
        score first.
        """
        request = conversions.build_query_request(
            top_k,
            namespace_name(namespace),
            values=values,
            sparse_values=sparse_values,
            filter=filter,
            include_values=include_values,
            include_metadata=include_metadata,
        )
        response = await self._execute(self._stub.Query, "query by value", request)
        return self._convert(conversions.grpc_to_pydantic_query_response, response, "query")

    async def delete_by_id(self, ids: Sequence[str], namespace: NamespaceLike = None) -> None:
        request = db_data_pb2.DeleteRequest(ids=list(ids), namespace=namespace_name(namespace))
        await self._execute(self._stub.Delete, "delete vectors by id", request)

    async def delete_by_filter(self, filter: FilterLike, namespace: NamespaceLike = None) -> None:
        request = db_data_pb2.DeleteRequest(namespace=namespace_name(namespace))
        request.filter.CopyFrom(conversions.filter_to_grpc_struct(filter))
        await self._execute(self._stub.Delete, "delete vectors by filter", request)

    async def delete_all(self, namespace: NamespaceLike = None) -> None:
        ns = namespace_name(namespace)
        request = db_data_pb2.DeleteRequest(delete_all=True, namespace=ns)
        await self._execute(self._stub.Delete, f"delete all vectors in namespace '{ns}'", request)
        logger.info("Deleted all vectors in namespace %r of %s", ns, self.host)

    async def fetch(self, ids: Sequence[str], namespace: NamespaceLike = None) -> models.FetchResponse:
        """Ids that do not exist are simply absent from the result."""
        request = db_data_pb2.FetchRequest(ids=list(ids), namespace=namespace_name(namespace))
        response = await self._execute(self._stub.Fetch, "fetch vectors", request)
        return self._convert(conversions.grpc_to_pydantic_fetch_response, response, "fetch vectors")

    async def update(
        self,
        id: str,
        values: Optional[Sequence[float]] = None,
        sparse_values: Optional[models.SparseValues] = None,
        metadata: Optional[models.Metadata] = None,
        namespace: NamespaceLike = None,
    ) -> None:
        request = conversions.build_update_request(
            id,
            namespace_name(namespace),
            values=values,
            sparse_values=sparse_values,
            metadata=metadata,
        )
        await self._execute(self._stub.Update, f"update vector '{id}'", request)

    async def list(
        self,
        namespace: NamespaceLike = None,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        pagination_token: Optional[str] = None,
    ) -> models.ListResponse:
        """Returns one page of vector ids."""
        request = conversions.build_list_request(
            namespace_name(namespace),
            prefix=prefix,
            limit=limit,
            pagination_token=pagination_token,
        )
        response = await self._execute(self._stub.List, "list vectors", request)
        return self._convert(conversions.grpc_to_pydantic_list_response, response, "list vectors")

    async def list_all(
        self,
        namespace: NamespaceLike = None,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AsyncIterator[str]:
        """Yields every id, following pagination tokens until the last page."""
        token: Optional[str] = None
        while True:
            page = await self.list(namespace=namespace, prefix=prefix, limit=limit, pagination_token=token)
            for vector_id in page.ids:
                yield vector_id
            token = page.next_pagination_token
            if token is None:
                return

    async def describe_index_stats(self, filter: Optional[FilterLike] = None) -> models.DescribeIndexStatsResponse:
        request = db_data_pb2.DescribeIndexStatsRequest()
        grpc_filter = conversions.filter_to_grpc_struct(filter)
        if grpc_filter is not None:
            request.filter.CopyFrom(grpc_filter)
        response = await self._execute(self._stub.DescribeIndexStats, "describe index stats", request)
        return self._convert(conversions.grpc_to_pydantic_index_stats, response, "describe index stats")


class IndexConnectionFactory:
    """Builds ``IndexClient`` instances that share one resolved configuration."""

    def __init__(
        self,
        config: ClientConfig,
        timeout: Optional[float] = None,
        root_certs: Optional[bytes] = None,
        grpc_options: Optional[List[Tuple[str, Any]]] = None,
    ):
        self.config = config
        self.timeout = timeout
        self.root_certs = root_certs
        self.grpc_options = grpc_options

    async def connect(self, host: str, wait_for_ready: Optional[float] = None) -> IndexClient:
        """
        Opens a channel to the index served at ``host``.

        Args:
            host: The index host as reported by ``describe_index``.
            wait_for_ready: Seconds to wait for the channel to connect. When
                omitted the channel connects lazily on the first call.

        Raises:
            PineconeTransportError: The channel could not be created or did
                not become ready in time.
        """
        target, secure = parse_index_host(host)
        try:
            if secure:
                credentials = grpc.ssl_channel_credentials(root_certificates=self.root_certs)
                channel = grpc.aio.secure_channel(target, credentials, options=self.grpc_options)
            else:
                channel = grpc.aio.insecure_channel(target, options=self.grpc_options)
            stub = db_data_pb2_grpc.VectorServiceStub(channel)
        except PineconeException:
            raise
        except Exception as e:
            raise PineconeTransportError(f"Failed to open channel to {target}: {e}", cause=e) from e

        if wait_for_ready is not None:
            try:
                await asyncio.wait_for(channel.channel_ready(), timeout=wait_for_ready)
            except asyncio.TimeoutError as e:
                await channel.close()
                raise PineconeTransportError(f"Channel to {target} not ready after {wait_for_ready}s", cause=e) from e

        logger.info("Opened %s channel to %s", "TLS" if secure else "insecure", target)
        return IndexClient(target, channel, stub, self.config.api_key, timeout=self.timeout)
