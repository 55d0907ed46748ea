"""
Metadata filter expressions.

Filters are evaluated by the server; the client only builds the tree and
serialises it to the service's filter language, e.g.::

    f = (Field("genre") == "drama") & Field("year").gte(2020)
    f.to_dict()
    # {"$and": [{"genre": {"$eq": "drama"}}, {"year": {"$gte": 2020}}]}
"""
from typing import Any, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field as PydanticField  # type: ignore

Scalar = Union[bool, int, float, str]


class _FilterNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __and__(self, other: "MetadataFilter") -> "And":
        return And(filters=_flatten(And, self, other))

    def __or__(self, other: "MetadataFilter") -> "Or":
        return Or(filters=_flatten(Or, self, other))


class Comparison(_FilterNode):
    """``field <op> value`` for a single scalar value."""
    field: str
    op: Literal["$eq", "$ne", "$gt", "$gte", "$lt", "$lte"]
    value: Scalar

    def to_dict(self) -> Dict[str, Any]:
        return {self.field: {self.op: self.value}}


class Membership(_FilterNode):
    """``field in values`` / ``field not in values``."""
    field: str
    op: Literal["$in", "$nin"]
    values: Tuple[Scalar, ...] = PydanticField(..., min_length=1)

    def to_dict(self) -> Dict[str, Any]:
        return {self.field: {self.op: list(self.values)}}


class And(_FilterNode):
    filters: Tuple["MetadataFilter", ...] = PydanticField(..., min_length=1)

    def to_dict(self) -> Dict[str, Any]:
        return {"$and": [f.to_dict() for f in self.filters]}


class Or(_FilterNode):
    filters: Tuple["MetadataFilter", ...] = PydanticField(..., min_length=1)

    def to_dict(self) -> Dict[str, Any]:
        return {"$or": [f.to_dict() for f in self.filters]}


MetadataFilter = Union[Comparison, Membership, And, Or]
And.model_rebuild()
Or.model_rebuild()

FilterLike = Union[MetadataFilter, Dict[str, Any]]


def _flatten(kind, *nodes) -> Tuple["MetadataFilter", ...]:
    flat: List[MetadataFilter] = []
    for node in nodes:
        if isinstance(node, kind):
            flat.extend(node.filters)
        else:
            flat.append(node)
    return tuple(flat)


class Field:
    """Entry point for building comparisons on one metadata field."""

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, value: Scalar) -> Comparison:  # type: ignore[override]
        return Comparison(field=self.name, op="$eq", value=value)

    def __ne__(self, value: Scalar) -> Comparison:  # type: ignore[override]
        return Comparison(field=self.name, op="$ne", value=value)

    __hash__ = None  # type: ignore[assignment]

    def eq(self, value: Scalar) -> Comparison:
        return Comparison(field=self.name, op="$eq", value=value)

    def ne(self, value: Scalar) -> Comparison:
        return Comparison(field=self.name, op="$ne", value=value)

    def gt(self, value: Union[int, float]) -> Comparison:
        return Comparison(field=self.name, op="$gt", value=value)

    def gte(self, value: Union[int, float]) -> Comparison:
        return Comparison(field=self.name, op="$gte", value=value)

    def lt(self, value: Union[int, float]) -> Comparison:
        return Comparison(field=self.name, op="$lt", value=value)

    def lte(self, value: Union[int, float]) -> Comparison:
        return Comparison(field=self.name, op="$lte", value=value)

    def is_in(self, values) -> Membership:
        return Membership(field=self.name, op="$in", values=tuple(values))

    def not_in(self, values) -> Membership:
        return Membership(field=self.name, op="$nin", values=tuple(values))


def to_filter_dict(filter: FilterLike) -> Dict[str, Any]:
    """Returns the wire form of a filter; raw dicts pass through unchanged."""
    if isinstance(filter, dict):
        return filter
    if isinstance(filter, _FilterNode):
        return filter.to_dict()
    raise TypeError(f"Unsupported filter type: {type(filter).__name__}")


__all__ = [
    "Comparison",
    "Membership",
    "And",
    "Or",
    "Field",
    "MetadataFilter",
    "FilterLike",
    "to_filter_dict",
]
