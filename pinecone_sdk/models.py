"""
Pydantic models for the Pinecone SDK.

These models provide Pythonic, type-hinted representations of the
control-plane (REST) and data-plane (gRPC) payloads. Descriptions
returned by the client are snapshots; they never refresh themselves.
"""
from typing import Annotated, List, Dict, Optional, Union, Literal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator  # type: ignore

# --- Enums ---

class Metric(str, Enum):
    """Distance metric used for similarity search."""
    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    DOTPRODUCT = "dotproduct"

class Cloud(str, Enum):
    """Public cloud hosting a serverless index."""
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"

class DeletionProtection(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"

class IndexState(str, Enum):
    INITIALIZING = "Initializing"
    INITIALIZATION_FAILED = "InitializationFailed"
    SCALING_UP = "ScalingUp"
    SCALING_DOWN = "ScalingDown"
    SCALING_UP_POD_SIZE = "ScalingUpPodSize"
    SCALING_DOWN_POD_SIZE = "ScalingDownPodSize"
    TERMINATING = "Terminating"
    READY = "Ready"

class CollectionStatus(str, Enum):
    INITIALIZING = "Initializing"
    READY = "Ready"
    TERMINATING = "Terminating"

# --- Namespaces ---

class Namespace(BaseModel):
    """
    A logical partition of vectors within one index.

    The empty name is the default namespace; passing ``None``, ``""`` or
    ``Namespace()`` to any operation routes to the same place.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""

    def __str__(self) -> str:
        return self.name

NamespaceLike = Union[Namespace, str, None]

def namespace_name(namespace: NamespaceLike) -> str:
    """Normalises any accepted namespace form to its wire value."""
    if namespace is None:
        return ""
    if isinstance(namespace, Namespace):
        return namespace.name
    return namespace

# --- Index specs (tagged union) ---

class ServerlessSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["serverless"] = "serverless"
    cloud: Cloud = Cloud.AWS
    region: str

class PodMetadataConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    indexed: Optional[List[str]] = None

class PodSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["pod"] = "pod"
    environment: str
    replicas: int = Field(1, gt=0)
    shards: int = Field(1, gt=0)
    pod_type: str = "p1.x1"
    pods: int = Field(1, gt=0)
    metadata_config: Optional[PodMetadataConfig] = None
    source_collection: Optional[str] = None

IndexSpec = Annotated[Union[ServerlessSpec, PodSpec], Field(discriminator="kind")]

# --- Control-plane models ---

class IndexStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    ready: bool
    state: IndexState

class IndexDescription(BaseModel):
    """Snapshot of an index as reported by the control plane."""
    model_config = ConfigDict(frozen=True)

    name: str
    dimension: int
    metric: Metric = Metric.COSINE
    host: str
    deletion_protection: Optional[DeletionProtection] = None
    spec: IndexSpec
    status: IndexStatus

class IndexList(BaseModel):
    indexes: List[IndexDescription] = Field(default_factory=list)

    def names(self) -> List[str]:
        return [index.name for index in self.indexes]

class CreateIndexRequest(BaseModel):
    """Structured configuration for a new index."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=45)
    dimension: int = Field(..., gt=0)
    metric: Metric = Metric.COSINE
    spec: IndexSpec
    deletion_protection: DeletionProtection = DeletionProtection.DISABLED

class CollectionDescription(BaseModel):
    """Snapshot of a collection as reported by the control plane."""
    model_config = ConfigDict(frozen=True)

    name: str
    size: Optional[int] = None
    status: CollectionStatus
    dimension: Optional[int] = None
    vector_count: Optional[int] = None
    environment: str

class CollectionList(BaseModel):
    collections: List[CollectionDescription] = Field(default_factory=list)

    def names(self) -> List[str]:
        return [collection.name for collection in self.collections]

class Embedding(BaseModel):
    values: List[float] = Field(default_factory=list)

class EmbeddingsUsage(BaseModel):
    total_tokens: Optional[int] = None

class EmbeddingsList(BaseModel):
    model: str
    data: List[Embedding] = Field(default_factory=list)
    usage: EmbeddingsUsage = Field(default_factory=EmbeddingsUsage)

# --- Data-plane models ---

# google.protobuf.Struct carries these; numbers come back as floats.
MetadataValue = Union[bool, int, float, str, List[str]]
Metadata = Dict[str, MetadataValue]

class SparseValues(BaseModel):
    """Sparse vector as parallel index/value lists."""
    model_config = ConfigDict(frozen=True)

    indices: List[int] = Field(default_factory=list)
    values: List[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_parallel(self) -> "SparseValues":
        if len(self.indices) != len(self.values):
            raise ValueError(
                f"Sparse indices and values must have the same length "
                f"({len(self.indices)} != {len(self.values)})"
            )
        return self

class Vector(BaseModel):
    """A record: caller-assigned id, dense values, optional sparse values and metadata."""
    id: str
    values: List[float] = Field(default_factory=list)
    sparse_values: Optional[SparseValues] = None
    metadata: Optional[Metadata] = None

class ScoredVector(BaseModel):
    """A query match. Higher score means more similar for every metric."""
    id: str
    score: float
    values: List[float] = Field(default_factory=list)
    sparse_values: Optional[SparseValues] = None
    metadata: Optional[Metadata] = None

class Usage(BaseModel):
    read_units: Optional[int] = None

class UpsertResponse(BaseModel):
    upserted_count: int

class QueryResponse(BaseModel):
    matches: List[ScoredVector] = Field(default_factory=list)
    namespace: str = ""
    usage: Optional[Usage] = None

class FetchResponse(BaseModel):
    vectors: Dict[str, Vector] = Field(default_factory=dict)
    namespace: str = ""
    usage: Optional[Usage] = None

class ListResponse(BaseModel):
    """One page of vector ids; ``next_pagination_token`` is None on the last page."""
    ids: List[str] = Field(default_factory=list)
    next_pagination_token: Optional[str] = None
    namespace: str = ""
    usage: Optional[Usage] = None

class NamespaceSummary(BaseModel):
    vector_count: int = 0

class DescribeIndexStatsResponse(BaseModel):
    namespaces: Dict[str, NamespaceSummary] = Field(default_factory=dict)
    dimension: int = 0
    index_fullness: float = 0.0
    total_vector_count: int = 0


__all__ = [
    "Metric",
    "Cloud",
    "DeletionProtection",
    "IndexState",
    "CollectionStatus",
    "Namespace",
    "NamespaceLike",
    "namespace_name",
    "ServerlessSpec",
    "PodMetadataConfig",
    "PodSpec",
    "IndexSpec",
    "IndexStatus",
    "IndexDescription",
    "IndexList",
    "CreateIndexRequest",
    "CollectionDescription",
    "CollectionList",
    "Embedding",
    "EmbeddingsUsage",
    "EmbeddingsList",
    "MetadataValue",
    "Metadata",
    "SparseValues",
    "Vector",
    "ScoredVector",
    "Usage",
    "UpsertResponse",
    "QueryResponse",
    "FetchResponse",
    "ListResponse",
    "NamespaceSummary",
    "DescribeIndexStatsResponse",
]
