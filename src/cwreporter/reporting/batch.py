"""
Bounded accumulation of data points and submission to the ingestion client.
"""

import logging
from typing import List

from ..adapters.ports import IngestionClient
from ..models import DataPoint
from ..validation import BatchSubmissionError

logger = logging.getLogger(__name__)

# CloudWatch accepts at most this many data points per PutMetricData request.
MAX_BATCH_SIZE = 20


class MetricBatch:
    """
    Accumulates data points and submits them in requests of at most
    ``max_size`` points.

    Adding a point that fills the batch submits it immediately. After every
    flush attempt the buffer is empty, whether or not the submission succeeded.
    When ``enabled`` is False the client is never called and each point is
    logged at info level instead.
    """

    def __init__(
        self,
        namespace: str,
        client: IngestionClient,
        enabled: bool = True,
        max_size: int = MAX_BATCH_SIZE,
    ):
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self.namespace = namespace
        self.client = client
        self.enabled = enabled
        self.max_size = max_size
        self._points: List[DataPoint] = []
        self.points_sent = 0
        self.requests_sent = 0

    def __len__(self) -> int:
        return len(self._points)

    def add(self, point: DataPoint) -> None:
        """
        Append a point, flushing if the batch is now full.

        Raises:
            BatchSubmissionError: If the triggered flush fails.
        """
        self._points.append(point)
        if len(self._points) >= self.max_size:
            self.flush()

    def extend(self, points: List[DataPoint]) -> None:
        for point in points:
            self.add(point)

    def flush(self) -> None:
        """
        Submit the buffered points, if any.

        Raises:
            BatchSubmissionError: If the client raised; the client's exception
                is chained as the cause.
        """
        if not self._points:
            return

        points = self._points
        try:
            if not self.enabled:
                for point in points:
                    logger.info(f"Dry run, not sending to namespace '{self.namespace}': {point}")
                return

            logger.debug(f"Sending {len(points)} data points to namespace '{self.namespace}'")
            try:
                self.client.put_metric_data(self.namespace, list(points))
            except Exception as e:
                contents = ", ".join(str(p) for p in points)
                logger.warning(
                    f"Failed submitting metrics to CloudWatch (namespace '{self.namespace}'): "
                    f"{e}. Batch was: [{contents}]"
                )
                raise BatchSubmissionError(self.namespace, points) from e
            self.points_sent += len(points)
            self.requests_sent += 1
        finally:
            self._points = []
