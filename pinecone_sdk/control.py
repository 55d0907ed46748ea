"""
Control-plane client: index and collection lifecycle over the REST API.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from . import conversions
from . import models
from .config import ClientConfig, resolve_config
from .data import IndexClient, IndexConnectionFactory
from .exceptions import (
    PineconeConfigurationError,
    PineconeSerializationError,
    PineconeStatusError,
    PineconeTransportError,
)
from .wait import (
    DEFAULT_MAX_TRANSIENT_FAILURES,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_WAIT_POLICY,
    Clock,
    NoWait,
    ReadinessPoller,
    WaitPolicy,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class PineconeClient:
    """
    The asynchronous client for the Pinecone control plane.

    Configuration comes from ``config`` when given, otherwise it is resolved
    from the keyword arguments and the environment (see ``resolve_config``).
    """
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        api_key: Optional[str] = None,
        controller_host: Optional[str] = None,
        additional_headers: Optional[Dict[str, str]] = None,
        source_tag: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_transient_failures: int = DEFAULT_MAX_TRANSIENT_FAILURES,
    ):
        self.config = config or resolve_config(
            api_key=api_key,
            controller_host=controller_host,
            additional_headers=additional_headers,
            source_tag=source_tag,
        )
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_transient_failures = max_transient_failures

        headers = {
            "Api-Key": self.config.api_key,
            "User-Agent": self.config.user_agent,
            **self.config.additional_headers,
        }
        self._http = httpx.AsyncClient(
            base_url=self.config.controller_host,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._factory = IndexConnectionFactory(self.config)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # --- Request helper ---
    async def _request(self, method: str, path: str, operation: str, json: Any = None) -> Any:
        """
        Sends one request and returns the decoded JSON body (None when empty).
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TransportError as e:
            raise PineconeTransportError(f"Failed to {operation}: {e}", cause=e) from e

        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError as e:
                if response.is_success:
                    raise PineconeSerializationError(f"Failed to {operation}: response is not JSON") from e
                body = response.text

        if response.status_code >= 400:
            raise PineconeStatusError.from_http_response(operation, response.status_code, body)
        return body

    # --- Index Methods ---
    async def create_index(
        self,
        request: models.CreateIndexRequest,
        wait_policy: WaitPolicy = DEFAULT_WAIT_POLICY,
        cancel_event: Optional[asyncio.Event] = None,
        clock: Optional[Clock] = None,
    ) -> models.IndexDescription:
        """
        Creates an index, then waits for it according to ``wait_policy``.

        Args:
            request: The index configuration.
            wait_policy: ``NoWait()``, ``WaitFor(timeout=...)`` or ``Indefinite()``.
            cancel_event: Setting this event stops the wait before the next poll.
            clock: Time source for the wait; defaults to the event loop's clock.

        Returns:
            The creation response for ``NoWait``, otherwise the ready description.

        Raises:
            PineconeWaitTimeoutError: The index was not ready before the deadline.
            PineconeCancelledError: ``cancel_event`` was set during the wait.
            PineconeIndexInitializationError: The server reported a failed initialisation.
        """
        body = await self._request(
            "POST", "/indexes", f"create index '{request.name}'",
            json=conversions.create_index_request_to_json(request),
        )
        created = conversions.json_to_index_description(body)
        logger.info("Created index %r", request.name)

        if isinstance(wait_policy, NoWait):
            return created

        poller = ReadinessPoller(
            request.name,
            lambda: self.describe_index(request.name),
            wait_policy,
            clock=clock,
            poll_interval=self.poll_interval,
            max_transient_failures=self.max_transient_failures,
            cancel_event=cancel_event,
        )
        return await poller.run()

    async def create_serverless_index(
        self,
        name: str,
        dimension: int,
        region: str,
        cloud: models.Cloud = models.Cloud.AWS,
        metric: models.Metric = models.Metric.COSINE,
        deletion_protection: models.DeletionProtection = models.DeletionProtection.DISABLED,
        wait_policy: WaitPolicy = DEFAULT_WAIT_POLICY,
        **wait_kwargs,
    ) -> models.IndexDescription:
        request = models.CreateIndexRequest(
            name=name,
            dimension=dimension,
            metric=metric,
            spec=models.ServerlessSpec(cloud=cloud, region=region),
            deletion_protection=deletion_protection,
        )
        return await self.create_index(request, wait_policy=wait_policy, **wait_kwargs)

    async def create_pod_index(
        self,
        name: str,
        dimension: int,
        environment: str,
        metric: models.Metric = models.Metric.COSINE,
        pod_type: str = "p1.x1",
        pods: int = 1,
        replicas: int = 1,
        shards: int = 1,
        deletion_protection: models.DeletionProtection = models.DeletionProtection.DISABLED,
        metadata_indexed: Optional[List[str]] = None,
        source_collection: Optional[str] = None,
        wait_policy: WaitPolicy = DEFAULT_WAIT_POLICY,
        **wait_kwargs,
    ) -> models.IndexDescription:
        metadata_config = None
        if metadata_indexed is not None:
            metadata_config = models.PodMetadataConfig(indexed=metadata_indexed)
        request = models.CreateIndexRequest(
            name=name,
            dimension=dimension,
            metric=metric,
            spec=models.PodSpec(
                environment=environment,
                pod_type=pod_type,
                pods=pods,
                replicas=replicas,
                shards=shards,
                metadata_config=metadata_config,
                source_collection=source_collection,
            ),
            deletion_protection=deletion_protection,
        )
        return await self.create_index(request, wait_policy=wait_policy, **wait_kwargs)

    async def describe_index(self, name: str) -> models.IndexDescription:
        body = await self._request("GET", f"/indexes/{name}", f"describe index '{name}'")
        return conversions.json_to_index_description(body)

    async def list_indexes(self) -> models.IndexList:
        body = await self._request("GET", "/indexes", "list indexes")
        return conversions.json_to_index_list(body)

    async def delete_index(self, name: str) -> None:
        await self._request("DELETE", f"/indexes/{name}", f"delete index '{name}'")
        logger.info("Deleted index %r", name)

    async def configure_index(
        self,
        name: str,
        deletion_protection: Optional[models.DeletionProtection] = None,
        replicas: Optional[int] = None,
        pod_type: Optional[str] = None,
    ) -> models.IndexDescription:
        """
        Changes replicas, pod type or deletion protection of an existing index.
        Only the arguments given are sent.
        """
        body = conversions.configure_index_request_to_json(
            deletion_protection=deletion_protection,
            replicas=replicas,
            pod_type=pod_type,
        )
        if not body:
            raise PineconeConfigurationError(
                "At least one of deletion_protection, replicas or pod_type must be provided"
            )
        response = await self._request("PATCH", f"/indexes/{name}", f"configure index '{name}'", json=body)
        return conversions.json_to_index_description(response)

    # --- Collection Methods ---
    async def create_collection(self, name: str, source: str) -> models.CollectionDescription:
        body = await self._request(
            "POST", "/collections", f"create collection '{name}'",
            json={"name": name, "source": source},
        )
        return conversions.json_to_collection_description(body)

    async def list_collections(self) -> models.CollectionList:
        body = await self._request("GET", "/collections", "list collections")
        return conversions.json_to_collection_list(body)

    async def describe_collection(self, name: str) -> models.CollectionDescription:
        body = await self._request("GET", f"/collections/{name}", f"describe collection '{name}'")
        return conversions.json_to_collection_description(body)

    async def delete_collection(self, name: str) -> None:
        await self._request("DELETE", f"/collections/{name}", f"delete collection '{name}'")

    # --- Inference ---
    async def embed(
        self,
        model: str,
        inputs: Sequence[str],
        parameters: Optional[Dict[str, Any]] = None,
    ) -> models.EmbeddingsList:
        body = await self._request(
            "POST", "/embed", f"embed with model '{model}'",
            json=conversions.embed_request_to_json(model, inputs, parameters),
        )
        return conversions.json_to_embeddings_list(body)

    # --- Data plane ---
    async def index(self, host: str, **kwargs) -> IndexClient:
        """Connects to the data plane of the index served at ``host``."""
        return await self._factory.connect(host, **kwargs)
