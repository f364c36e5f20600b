"""
Ingestion client for the CloudWatch PutMetricData API, backed by boto3.
"""

import logging
from typing import Any, Optional, Sequence

import boto3
from botocore.exceptions import ClientError

from ..models import DataPoint

logger = logging.getLogger(__name__)


class CloudWatchIngestionClient:
    """
    Submits batches of data points with ``PutMetricData``.

    Credentials, retries and the HTTP timeout are boto3's concern; configure
    them on the client passed in, or through the usual AWS environment.
    """

    def __init__(self, client: Any = None, region_name: Optional[str] = None, **client_kwargs: Any):
        """
        Args:
            client: An existing ``boto3.client("cloudwatch")``.
            region_name: AWS region, when a client is created here.
            **client_kwargs: Extra arguments for ``boto3.client``.
        """
        if client is None:
            client = boto3.client("cloudwatch", region_name=region_name, **client_kwargs)
        self.cloudwatch = client

    def put_metric_data(self, namespace: str, points: Sequence[DataPoint]) -> None:
        """
        Submit one batch.

        Raises:
            botocore.exceptions.ClientError: If CloudWatch rejects the request.
            botocore.exceptions.BotoCoreError: On transport or credential failures.
        """
        try:
            self.cloudwatch.put_metric_data(
                Namespace=namespace,
                MetricData=[point.to_cloudwatch() for point in points],
            )
        except ClientError as error:
            code = error.response.get("Error", {}).get("Code", "Unknown")
            logger.debug(f"PutMetricData to namespace '{namespace}' rejected with {code}")
            raise

    def __repr__(self) -> str:
        region = getattr(getattr(self.cloudwatch, "meta", None), "region_name", None)
        return f"CloudWatchIngestionClient(region_name={region!r})"
