"""
Pinecone Python SDK
"""
__version__ = "0.1.0"

from .config import ClientConfig, resolve_config
from .control import PineconeClient
from .data import IndexClient, IndexConnectionFactory
from .exceptions import (
    PineconeException,
    PineconeConfigurationError,
    PineconeMissingCredentialError,
    PineconeInvalidHeadersError,
    PineconeTransportError,
    PineconeSerializationError,
    PineconeStatusError,
    PineconeWaitTimeoutError,
    PineconeIndexInitializationError,
    PineconeCancelledError,
    StatusKind,
)
from .filters import And, Comparison, Field, Membership, MetadataFilter, Or
from .models import (
    Metric,
    Cloud,
    DeletionProtection,
    IndexState,
    Namespace,
    ServerlessSpec,
    PodSpec,
    IndexStatus,
    IndexDescription,
    IndexList,
    CreateIndexRequest,
    CollectionDescription,
    CollectionList,
    EmbeddingsList,
    SparseValues,
    Vector,
    ScoredVector,
    UpsertResponse,
    QueryResponse,
    FetchResponse,
    ListResponse,
    DescribeIndexStatsResponse,
)
from .wait import Indefinite, NoWait, PollState, ReadinessPoller, WaitFor, WaitPolicy

__all__ = [
    "ClientConfig",
    "resolve_config",
    "PineconeClient",
    "IndexClient",
    "IndexConnectionFactory",
    # Wait policies
    "NoWait",
    "WaitFor",
    "Indefinite",
    "WaitPolicy",
    "PollState",
    "ReadinessPoller",
    # Exceptions
    "PineconeException",
    "PineconeConfigurationError",
    "PineconeMissingCredentialError",
    "PineconeInvalidHeadersError",
    "PineconeTransportError",
    "PineconeSerializationError",
    "PineconeStatusError",
    "PineconeWaitTimeoutError",
    "PineconeIndexInitializationError",
    "PineconeCancelledError",
    "StatusKind",
    # Filters
    "Field",
    "Comparison",
    "Membership",
    "And",
    "Or",
    "MetadataFilter",
    # Models & Enums
    "Metric",
    "Cloud",
    "DeletionProtection",
    "IndexState",
    "Namespace",
    "ServerlessSpec",
    "PodSpec",
    "IndexStatus",
    "IndexDescription",
    "IndexList",
    "CreateIndexRequest",
    "CollectionDescription",
    "CollectionList",
    "EmbeddingsList",
    "SparseValues",
    "Vector",
    "ScoredVector",
    "UpsertResponse",
    "QueryResponse",
    "FetchResponse",
    "ListResponse",
    "DescribeIndexStatsResponse",
]
