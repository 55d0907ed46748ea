"""Client stub for the data-plane ``VectorService``."""
from . import db_data_pb2 as db__data__pb2

SERVICE_NAME = "VectorService"


class VectorServiceStub(object):
    """Binds each VectorService RPC to a unary-unary callable on ``channel``."""

    def __init__(self, channel):
        self.Upsert = channel.unary_unary(
            f"/{SERVICE_NAME}/Upsert",
            request_serializer=db__data__pb2.UpsertRequest.SerializeToString,
            response_deserializer=db__data__pb2.UpsertResponse.FromString,
        )
        self.Delete = channel.unary_unary(
            f"/{SERVICE_NAME}/Delete",
            request_serializer=db__data__pb2.DeleteRequest.SerializeToString,
            response_deserializer=db__data__pb2.DeleteResponse.FromString,
        )
        self.Fetch = channel.unary_unary(
            f"/{SERVICE_NAME}/Fetch",
            request_serializer=db__data__pb2.FetchRequest.SerializeToString,
            response_deserializer=db__data__pb2.FetchResponse.FromString,
        )
        self.List = channel.unary_unary(
            f"/{SERVICE_NAME}/List",
            request_serializer=db__data__pb2.ListRequest.SerializeToString,
            response_deserializer=db__data__pb2.ListResponse.FromString,
        )
        self.Query = channel.unary_unary(
            f"/{SERVICE_NAME}/Query",
            request_serializer=db__data__pb2.QueryRequest.SerializeToString,
            response_deserializer=db__data__pb2.QueryResponse.FromString,
        )
        self.Update = channel.unary_unary(
            f"/{SERVICE_NAME}/Update",
            request_serializer=db__data__pb2.UpdateRequest.SerializeToString,
            response_deserializer=db__data__pb2.UpdateResponse.FromString,
        )
        self.DescribeIndexStats = channel.unary_unary(
            f"/{SERVICE_NAME}/DescribeIndexStats",
            request_serializer=db__data__pb2.DescribeIndexStatsRequest.SerializeToString,
            response_deserializer=db__data__pb2.DescribeIndexStatsResponse.FromString,
        )
