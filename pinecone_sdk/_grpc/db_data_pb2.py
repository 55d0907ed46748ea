"""
Message classes for the data-plane wire schema (API version 2024-07).

The schema is declared with ``descriptor_pb2`` and registered in the default
descriptor pool, the same registration a protoc-generated ``_pb2`` module
performs with its serialized descriptor. Field numbers match the service's
``VectorService`` definition; fields declared ``optional`` upstream are plain
proto3 scalars here, which encode identically when unset.
"""
from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import message_factory as _message_factory
from google.protobuf import struct_pb2  # noqa: F401  (registers google/protobuf/struct.proto)

PACKAGE = "pinecone_sdk.data.v2024_07"

_FDP = descriptor_pb2.FieldDescriptorProto
_STRUCT = ".google.protobuf.Struct"

_SCALARS = {
    "string": _FDP.TYPE_STRING,
    "float": _FDP.TYPE_FLOAT,
    "uint32": _FDP.TYPE_UINT32,
    "bool": _FDP.TYPE_BOOL,
}


def _ref(name: str) -> str:
    return f".{PACKAGE}.{name}"


def _field(name, number, kind, repeated=False):
    label = _FDP.LABEL_REPEATED if repeated else _FDP.LABEL_OPTIONAL
    if kind in _SCALARS:
        return _FDP(name=name, number=number, type=_SCALARS[kind], label=label)
    return _FDP(name=name, number=number, type=_FDP.TYPE_MESSAGE, type_name=kind, label=label)


def _message(name, *fields, maps=()):
    message = descriptor_pb2.DescriptorProto(name=name)
    message.field.extend(fields)
    for field_name, number, value_type in maps:
        entry_name = "".join(part.capitalize() for part in field_name.split("_")) + "Entry"
        entry = message.nested_type.add(name=entry_name)
        entry.options.map_entry = True
        entry.field.extend([
            _field("key", 1, "string"),
            _field("value", 2, value_type),
        ])
        message.field.append(_field(field_name, number, _ref(f"{name}.{entry_name}"), repeated=True))
    return message


_FILE = descriptor_pb2.FileDescriptorProto(
    name="pinecone_sdk/db_data_2024_07.proto",
    package=PACKAGE,
    syntax="proto3",
    dependency=["google/protobuf/struct.proto"],
)
_FILE.message_type.extend([
    _message(
        "SparseValues",
        _field("indices", 1, "uint32", repeated=True),
        _field("values", 2, "float", repeated=True),
    ),
    _message(
        "Vector",
        _field("id", 1, "string"),
        _field("values", 2, "float", repeated=True),
        _field("metadata", 3, _STRUCT),
        _field("sparse_values", 4, _ref("SparseValues")),
    ),
    _message(
        "ScoredVector",
        _field("id", 1, "string"),
        _field("score", 2, "float"),
        _field("values", 3, "float", repeated=True),
        _field("metadata", 4, _STRUCT),
        _field("sparse_values", 5, _ref("SparseValues")),
    ),
    _message("Usage", _field("read_units", 1, "uint32")),
    _message(
        "UpsertRequest",
        _field("vectors", 1, _ref("Vector"), repeated=True),
        _field("namespace", 2, "string"),
    ),
    _message("UpsertResponse", _field("upserted_count", 1, "uint32")),
    _message(
        "DeleteRequest",
        _field("ids", 1, "string", repeated=True),
        _field("delete_all", 2, "bool"),
        _field("namespace", 3, "string"),
        _field("filter", 4, _STRUCT),
    ),
    _message("DeleteResponse"),
    _message(
        "FetchRequest",
        _field("ids", 1, "string", repeated=True),
        _field("namespace", 2, "string"),
    ),
    _message(
        "FetchResponse",
        _field("namespace", 2, "string"),
        _field("usage", 3, _ref("Usage")),
        maps=[("vectors", 1, _ref("Vector"))],
    ),
    _message(
        "ListRequest",
        _field("prefix", 1, "string"),
        _field("limit", 2, "uint32"),
        _field("pagination_token", 3, "string"),
        _field("namespace", 4, "string"),
    ),
    _message("Pagination", _field("next", 1, "string")),
    _message("ListItem", _field("id", 1, "string")),
    _message(
        "ListResponse",
        _field("vectors", 1, _ref("ListItem"), repeated=True),
        _field("pagination", 2, _ref("Pagination")),
        _field("namespace", 3, "string"),
        _field("usage", 4, _ref("Usage")),
    ),
    _message(
        "QueryRequest",
        _field("namespace", 1, "string"),
        _field("top_k", 2, "uint32"),
        _field("filter", 3, _STRUCT),
        _field("include_values", 4, "bool"),
        _field("include_metadata", 5, "bool"),
        _field("vector", 7, "float", repeated=True),
        _field("id", 8, "string"),
        _field("sparse_vector", 9, _ref("SparseValues")),
    ),
    _message(
        "QueryResponse",
        _field("matches", 2, _ref("ScoredVector"), repeated=True),
        _field("namespace", 3, "string"),
        _field("usage", 4, _ref("Usage")),
    ),
    _message(
        "UpdateRequest",
        _field("id", 1, "string"),
        _field("values", 2, "float", repeated=True),
        _field("set_metadata", 3, _STRUCT),
        _field("namespace", 4, "string"),
        _field("sparse_values", 5, _ref("SparseValues")),
    ),
    _message("UpdateResponse"),
    _message("DescribeIndexStatsRequest", _field("filter", 1, _STRUCT)),
    _message("NamespaceSummary", _field("vector_count", 1, "uint32")),
    _message(
        "DescribeIndexStatsResponse",
        _field("dimension", 2, "uint32"),
        _field("index_fullness", 3, "float"),
        _field("total_vector_count", 4, "uint32"),
        maps=[("namespaces", 1, _ref("NamespaceSummary"))],
    ),
])

DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(_FILE.SerializeToString())


def _class(name):
    return _message_factory.GetMessageClass(DESCRIPTOR.message_types_by_name[name])


SparseValues = _class("SparseValues")
Vector = _class("Vector")
ScoredVector = _class("ScoredVector")
Usage = _class("Usage")
UpsertRequest = _class("UpsertRequest")
UpsertResponse = _class("UpsertResponse")
DeleteRequest = _class("DeleteRequest")
DeleteResponse = _class("DeleteResponse")
FetchRequest = _class("FetchRequest")
FetchResponse = _class("FetchResponse")
ListRequest = _class("ListRequest")
Pagination = _class("Pagination")
ListItem = _class("ListItem")
ListResponse = _class("ListResponse")
QueryRequest = _class("QueryRequest")
QueryResponse = _class("QueryResponse")
UpdateRequest = _class("UpdateRequest")
UpdateResponse = _class("UpdateResponse")
DescribeIndexStatsRequest = _class("DescribeIndexStatsRequest")
NamespaceSummary = _class("NamespaceSummary")
DescribeIndexStatsResponse = _class("DescribeIndexStatsResponse")
