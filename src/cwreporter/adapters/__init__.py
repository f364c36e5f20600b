"""
Adapters for the reporter's collaborators: the metrics registry and the
CloudWatch ingestion client.
"""

from .cloudwatch import CloudWatchIngestionClient
from .ports import IngestionClient, MetricsRegistry
from .registry import InMemoryRegistry

__all__ = [
    "CloudWatchIngestionClient",
    "IngestionClient",
    "MetricsRegistry",
    "InMemoryRegistry",
]
