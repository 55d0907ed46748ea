"""
Conversion utilities between Pydantic models and the wire formats:
JSON bodies for the control plane, protobuf messages for the data plane.
"""
from typing import Any, Dict, Optional, Sequence

from google.protobuf import struct_pb2
from pydantic import ValidationError  # type: ignore

from pinecone_sdk import models
from pinecone_sdk._grpc import db_data_pb2
from pinecone_sdk.exceptions import PineconeSerializationError
from pinecone_sdk.filters import FilterLike, to_filter_dict

# --- Helpers for google.protobuf.Value / Struct ---

def _grpc_value_to_python(grpc_val: struct_pb2.Value) -> Any:
    kind = grpc_val.WhichOneof("kind")
    if kind == "number_value":
        return grpc_val.number_value
    if kind == "string_value":
        return grpc_val.string_value
    if kind == "bool_value":
        return grpc_val.bool_value
    if kind == "struct_value":
        return {k: _grpc_value_to_python(v) for k, v in grpc_val.struct_value.fields.items()}
    if kind == "list_value":
        return [_grpc_value_to_python(v) for v in grpc_val.list_value.values]
    return None

def _python_value_to_grpc(value: Any) -> struct_pb2.Value:
    grpc_val = struct_pb2.Value()
    if value is None:
        grpc_val.null_value = struct_pb2.NULL_VALUE
    elif isinstance(value, bool):
        grpc_val.bool_value = value
    elif isinstance(value, (int, float)):
        grpc_val.number_value = float(value)
    elif isinstance(value, str):
        grpc_val.string_value = value
    elif isinstance(value, (list, tuple)):
        for item in value:
            grpc_val.list_value.values.add().CopyFrom(_python_value_to_grpc(item))
    elif isinstance(value, dict):
        for k, v in value.items():
            grpc_val.struct_value.fields[k].CopyFrom(_python_value_to_grpc(v))
    else:
        raise TypeError(f"Unsupported metadata value type: {type(value).__name__}")
    return grpc_val

def dict_to_grpc_struct(data: Dict[str, Any]) -> struct_pb2.Struct:
    struct = struct_pb2.Struct()
    for k, v in data.items():
        struct.fields[k].CopyFrom(_python_value_to_grpc(v))
    return struct

def grpc_struct_to_dict(struct: struct_pb2.Struct) -> Dict[str, Any]:
    return {k: _grpc_value_to_python(v) for k, v in struct.fields.items()}

def filter_to_grpc_struct(filter: Optional[FilterLike]) -> Optional[struct_pb2.Struct]:
    if filter is None:
        return None
    return dict_to_grpc_struct(to_filter_dict(filter))

# --- Data plane: models -> protobuf ---

def pydantic_to_grpc_sparse_values(sparse: models.SparseValues) -> db_data_pb2.SparseValues:
    return db_data_pb2.SparseValues(indices=sparse.indices, values=sparse.values)

def pydantic_to_grpc_vector(vector: models.Vector) -> db_data_pb2.Vector:
    vector_pb = db_data_pb2.Vector(id=vector.id, values=vector.values)
    if vector.sparse_values is not None:
        vector_pb.sparse_values.CopyFrom(pydantic_to_grpc_sparse_values(vector.sparse_values))
    if vector.metadata is not None:
        vector_pb.metadata.CopyFrom(dict_to_grpc_struct(vector.metadata))
    return vector_pb

def build_upsert_request(vectors: Sequence[models.Vector], namespace: str) -> db_data_pb2.UpsertRequest:
    return db_data_pb2.UpsertRequest(
        vectors=[pydantic_to_grpc_vector(v) for v in vectors],
        namespace=namespace,
    )

def build_query_request(
    top_k: int,
    namespace: str,
    id: Optional[str] = None,
    values: Optional[Sequence[float]] = None,
    sparse_values: Optional[models.SparseValues] = None,
    filter: Optional[FilterLike] = None,
    include_values: bool = False,
    include_metadata: bool = False,
) -> db_data_pb2.QueryRequest:
    if (id is None) == (values is None):
        raise ValueError("Exactly one of id or values must be given")
    request = db_data_pb2.QueryRequest(
        top_k=top_k,
        namespace=namespace,
        include_values=include_values,
        include_metadata=include_metadata,
    )
    if id is not None:
        request.id = id
    else:
        request.vector.extend(values)
        if sparse_values is not None:
            request.sparse_vector.CopyFrom(pydantic_to_grpc_sparse_values(sparse_values))
    grpc_filter = filter_to_grpc_struct(filter)
    if grpc_filter is not None:
        request.filter.CopyFrom(grpc_filter)
    return request

def build_update_request(
    id: str,
    namespace: str,
    values: Optional[Sequence[float]] = None,
    sparse_values: Optional[models.SparseValues] = None,
    metadata: Optional[models.Metadata] = None,
) -> db_data_pb2.UpdateRequest:
    request = db_data_pb2.UpdateRequest(id=id, namespace=namespace)
    if values is not None:
        request.values.extend(values)
    if sparse_values is not None:
        request.sparse_values.CopyFrom(pydantic_to_grpc_sparse_values(sparse_values))
    if metadata is not None:
        request.set_metadata.CopyFrom(dict_to_grpc_struct(metadata))
    return request

def build_list_request(
    namespace: str,
    prefix: Optional[str] = None,
    limit: Optional[int] = None,
    pagination_token: Optional[str] = None,
) -> db_data_pb2.ListRequest:
    request = db_data_pb2.ListRequest(namespace=namespace)
    if prefix is not None:
        request.prefix = prefix
    if limit is not None:
        request.limit = limit
    if pagination_token is not None:
        request.pagination_token = pagination_token
    return request

# --- Data plane: protobuf -> models ---

def _usage(message) -> Optional[models.Usage]:
    if not message.HasField("usage"):
        return None
    return models.Usage(read_units=message.usage.read_units)

def _sparse(message, field: str) -> Optional[models.SparseValues]:
    if not message.HasField(field):
        return None
    sparse_pb = getattr(message, field)
    return models.SparseValues(indices=list(sparse_pb.indices), values=list(sparse_pb.values))

def _metadata(message) -> Optional[Dict[str, Any]]:
    return grpc_struct_to_dict(message.metadata) if message.HasField("metadata") else None

def grpc_to_pydantic_vector(vector_pb: db_data_pb2.Vector) -> models.Vector:
    return models.Vector(
        id=vector_pb.id,
        values=list(vector_pb.values),
        sparse_values=_sparse(vector_pb, "sparse_values"),
        metadata=_metadata(vector_pb),
    )

def grpc_to_pydantic_scored_vector(scored_pb: db_data_pb2.ScoredVector) -> models.ScoredVector:
    return models.ScoredVector(
        id=scored_pb.id,
        score=scored_pb.score,
        values=list(scored_pb.values),
        sparse_values=_sparse(scored_pb, "sparse_values"),
        metadata=_metadata(scored_pb),
    )

def grpc_to_pydantic_upsert_response(response_pb: db_data_pb2.UpsertResponse) -> models.UpsertResponse:
    return models.UpsertResponse(upserted_count=response_pb.upserted_count)

def grpc_to_pydantic_query_response(response_pb: db_data_pb2.QueryResponse) -> models.QueryResponse:
    return models.QueryResponse(
        matches=[grpc_to_pydantic_scored_vector(m) for m in response_pb.matches],
        namespace=response_pb.namespace,
        usage=_usage(response_pb),
    )

def grpc_to_pydantic_fetch_response(response_pb: db_data_pb2.FetchResponse) -> models.FetchResponse:
    return models.FetchResponse(
        vectors={k: grpc_to_pydantic_vector(v) for k, v in response_pb.vectors.items()},
        namespace=response_pb.namespace,
        usage=_usage(response_pb),
    )

def grpc_to_pydantic_list_response(response_pb: db_data_pb2.ListResponse) -> models.ListResponse:
    next_token = None
    if response_pb.HasField("pagination") and response_pb.pagination.next:
        next_token = response_pb.pagination.next
    return models.ListResponse(
        ids=[item.id for item in response_pb.vectors],
        next_pagination_token=next_token,
        namespace=response_pb.namespace,
        usage=_usage(response_pb),
    )

def grpc_to_pydantic_index_stats(
    response_pb: db_data_pb2.DescribeIndexStatsResponse,
) -> models.DescribeIndexStatsResponse:
    return models.DescribeIndexStatsResponse(
        namespaces={
            name: models.NamespaceSummary(vector_count=summary.vector_count)
            for name, summary in response_pb.namespaces.items()
        },
        dimension=response_pb.dimension,
        index_fullness=response_pb.index_fullness,
        total_vector_count=response_pb.total_vector_count,
    )

# --- Control plane: models <-> JSON ---

def index_spec_to_json(spec: models.IndexSpec) -> Dict[str, Any]:
    if isinstance(spec, models.ServerlessSpec):
        return {"serverless": {"cloud": spec.cloud.value, "region": spec.region}}
    if isinstance(spec, models.PodSpec):
        pod: Dict[str, Any] = {
            "environment": spec.environment,
            "replicas": spec.replicas,
            "shards": spec.shards,
            "pod_type": spec.pod_type,
            "pods": spec.pods,
        }
        if spec.metadata_config is not None:
            pod["metadata_config"] = spec.metadata_config.model_dump(exclude_none=True)
        if spec.source_collection is not None:
            pod["source_collection"] = spec.source_collection
        return {"pod": pod}
    raise TypeError(f"Unsupported index spec: {type(spec).__name__}")

def create_index_request_to_json(request: models.CreateIndexRequest) -> Dict[str, Any]:
    return {
        "name": request.name,
        "dimension": request.dimension,
        "metric": request.metric.value,
        "deletion_protection": request.deletion_protection.value,
        "spec": index_spec_to_json(request.spec),
    }

def configure_index_request_to_json(
    deletion_protection: Optional[models.DeletionProtection] = None,
    replicas: Optional[int] = None,
    pod_type: Optional[str] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    pod: Dict[str, Any] = {}
    if replicas is not None:
        pod["replicas"] = replicas
    if pod_type is not None:
        pod["pod_type"] = pod_type
    if pod:
        body["spec"] = {"pod": pod}
    if deletion_protection is not None:
        body["deletion_protection"] = models.DeletionProtection(deletion_protection).value
    return body

def _json_to_index_spec(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise PineconeSerializationError(f"Index spec must be an object, got {type(data).__name__}")
    variants = [key for key in ("serverless", "pod") if data.get(key) is not None]
    if len(variants) != 1:
        raise PineconeSerializationError(
            f"Index spec must contain exactly one of 'serverless' or 'pod', got {sorted(data)}"
        )
    kind = variants[0]
    return {"kind": kind, **data[kind]}

def json_to_index_description(data: Any) -> models.IndexDescription:
    try:
        if not isinstance(data, dict):
            raise PineconeSerializationError(f"Index description must be an object, got {type(data).__name__}")
        payload = dict(data)
        payload["spec"] = _json_to_index_spec(data.get("spec"))
        return models.IndexDescription.model_validate(payload)
    except ValidationError as e:
        raise PineconeSerializationError(f"Malformed index description: {e}") from e

def json_to_index_list(data: Any) -> models.IndexList:
    if not isinstance(data, dict):
        raise PineconeSerializationError("Index list must be an object")
    indexes = data.get("indexes") or []
    return models.IndexList(indexes=[json_to_index_description(item) for item in indexes])

def _validate(model, data: Any, what: str):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise PineconeSerializationError(f"Malformed {what}: {e}") from e

def json_to_collection_description(data: Any) -> models.CollectionDescription:
    return _validate(models.CollectionDescription, data, "collection description")

def json_to_collection_list(data: Any) -> models.CollectionList:
    return _validate(models.CollectionList, data if data is not None else {}, "collection list")

def embed_request_to_json(
    model: str,
    inputs: Sequence[str],
    parameters: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "model": model,
        "inputs": [{"text": text} for text in inputs],
    }
    if parameters:
        body["parameters"] = dict(parameters)
    return body

def json_to_embeddings_list(data: Any) -> models.EmbeddingsList:
    return _validate(models.EmbeddingsList, data, "embeddings list")
