"""
Search application services.

Pipeline: QueryEncoder → SearchGateway → ReactivePipeline → PipelineSession
"""

from .gateway import SearchGateway
from .pipeline import ReactivePipeline, SearchOutcome
from .query_encoder import MAX_QUERY_LENGTH, QueryEncoder
from .session import PipelineSession

__all__ = [
    "MAX_QUERY_LENGTH",
    "PipelineSession",
    "QueryEncoder",
    "ReactivePipeline",
    "SearchGateway",
    "SearchOutcome",
]
