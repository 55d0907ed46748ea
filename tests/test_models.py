"""
Unit tests for Pydantic models in pinecone_sdk.models.
"""
import pytest
from pydantic import TypeAdapter, ValidationError

from pinecone_sdk import models

def test_vector_creation():
    """Test basic Vector model creation."""
    v = models.Vector(id="v1", values=[1.0, 2.0, 3.0], metadata={"genre": "drama", "year": 2020})
    assert v.id == "v1"
    assert v.values == [1.0, 2.0, 3.0]
    assert v.sparse_values is None
    assert v.metadata == {"genre": "drama", "year": 2020}

    v_empty = models.Vector(id="v2")
    assert v_empty.values == []
    assert v_empty.metadata is None

def test_vector_requires_id():
    with pytest.raises(ValidationError):
        models.Vector(values=[0.1])

def test_sparse_values_parallel_lists():
    sv = models.SparseValues(indices=[1, 5], values=[0.5, 0.25])
    assert sv.indices == [1, 5]
    assert sv.values == [0.5, 0.25]

    with pytest.raises(ValidationError, match="same length"):
        models.SparseValues(indices=[1, 2, 3], values=[0.5])

def test_namespace_forms_are_equivalent():
    """None, "" and Namespace() all name the default namespace."""
    assert models.namespace_name(None) == ""
    assert models.namespace_name("") == ""
    assert models.namespace_name(models.Namespace()) == ""
    assert models.namespace_name(models.Namespace(name="books")) == "books"
    assert models.namespace_name("books") == "books"
    assert str(models.Namespace(name="books")) == "books"

def test_namespace_is_immutable():
    ns = models.Namespace(name="a")
    with pytest.raises(ValidationError):
        ns.name = "b"

def test_index_spec_discriminated_union():
    adapter = TypeAdapter(models.IndexSpec)

    serverless = adapter.validate_python({"kind": "serverless", "cloud": "gcp", "region": "us-central1"})
    assert isinstance(serverless, models.ServerlessSpec)
    assert serverless.cloud == models.Cloud.GCP

    pod = adapter.validate_python({"kind": "pod", "environment": "us-east1-gcp", "pod_type": "p2.x1"})
    assert isinstance(pod, models.PodSpec)
    assert pod.replicas == 1
    assert pod.shards == 1
    assert pod.pods == 1

    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "starter"})

def test_pod_spec_rejects_non_positive_counts():
    with pytest.raises(ValidationError):
        models.PodSpec(environment="us-east1-gcp", replicas=0)

def test_create_index_request_defaults():
    req = models.CreateIndexRequest(
        name="idx",
        dimension=8,
        spec=models.ServerlessSpec(region="us-east-1"),
    )
    assert req.metric == models.Metric.COSINE
    assert req.deletion_protection == models.DeletionProtection.DISABLED
    assert req.spec.cloud == models.Cloud.AWS

def test_create_index_request_validation():
    spec = models.ServerlessSpec(region="us-east-1")
    with pytest.raises(ValidationError):
        models.CreateIndexRequest(name="", dimension=8, spec=spec)
    with pytest.raises(ValidationError):
        models.CreateIndexRequest(name="x" * 46, dimension=8, spec=spec)
    with pytest.raises(ValidationError):
        models.CreateIndexRequest(name="idx", dimension=0, spec=spec)

def test_index_description_and_list():
    desc = models.IndexDescription(
        name="idx",
        dimension=3,
        metric="euclidean",
        host="idx-abc.svc.pinecone.io",
        spec={"kind": "serverless", "cloud": "aws", "region": "us-east-1"},
        status={"ready": False, "state": "Initializing"},
    )
    assert desc.metric == models.Metric.EUCLIDEAN
    assert desc.status.state == models.IndexState.INITIALIZING
    assert desc.status.ready is False

    index_list = models.IndexList(indexes=[desc])
    assert index_list.names() == ["idx"]
    assert models.IndexList().names() == []

def test_collection_list_names():
    collections = models.CollectionList(collections=[
        {"name": "c1", "status": "Ready", "environment": "us-east1-gcp"},
        {"name": "c2", "status": "Initializing", "environment": "us-east1-gcp"},
    ])
    assert collections.names() == ["c1", "c2"]
    assert collections.collections[1].status == models.CollectionStatus.INITIALIZING

def test_scored_vector_and_query_response():
    resp = models.QueryResponse(matches=[
        {"id": "a", "score": 0.9},
        {"id": "b", "score": 0.5, "metadata": {"tags": ["x", "y"]}},
    ])
    assert [m.id for m in resp.matches] == ["a", "b"]
    assert resp.matches[1].metadata == {"tags": ["x", "y"]}
    assert resp.namespace == ""
    assert resp.usage is None

def test_list_response_last_page():
    page = models.ListResponse(ids=["a", "b"])
    assert page.next_pagination_token is None

def test_describe_index_stats_defaults():
    stats = models.DescribeIndexStatsResponse()
    assert stats.namespaces == {}
    assert stats.total_vector_count == 0
    assert stats.index_fullness == 0.0
