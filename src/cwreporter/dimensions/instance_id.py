"""
InstanceId dimension provider backed by the EC2 instance metadata service.

The instance id is looked up lazily, at most once per retry interval, until a
lookup succeeds. Until then the sentinel ``unknown`` is reported. A lookup is
bounded by one HTTP timeout and never raises to the caller.
"""

import logging
import threading
import time
from typing import Callable, List, Optional

import httpx

from ..models import Dimension, MetricSample
from .base import DimensionProvider, MetricFilter, match_all

logger = logging.getLogger(__name__)

METADATA_URL = "http://169.254.169.254/latest/meta-data/instance-id"
DIMENSION_NAME = "InstanceId"
UNKNOWN_INSTANCE_ID = "unknown"


class InstanceIdProvider(DimensionProvider):
    """
    Adds an ``InstanceId`` dimension to metrics.

    With an explicit `instance_id` the value is fixed for the provider's
    lifetime and the metadata service is never contacted. Otherwise the id is
    fetched from `url` on first use and, after a failure, retried no sooner
    than `retry_interval` seconds later. Once resolved it never changes.

    Attributes:
        url: Metadata endpoint returning the instance id as plain text.
        timeout: Upper bound in seconds for one lookup.
        retry_interval: Minimum seconds between lookup attempts.
    """

    def __init__(
        self,
        metric_filter: MetricFilter = match_all,
        instance_id: Optional[str] = None,
        url: str = METADATA_URL,
        timeout: float = 2.0,
        retry_interval: float = 60.0,
        http_client: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            metric_filter: Only matching metrics receive the dimension.
                Runtime points always receive it.
            instance_id: Fixed id; disables the metadata lookup.
            url: Metadata endpoint.
            timeout: HTTP timeout in seconds.
            retry_interval: Cool-down between failed lookups, in seconds.
            http_client: Client to use instead of a short-lived one per lookup.
                The provider does not close it.
            clock: Monotonic time source, in seconds.

        Raises:
            ValueError: If `instance_id` is given but blank.
        """
        if instance_id is not None and not instance_id.strip():
            raise ValueError("instance_id must be a non-empty string; omit it to look the id up")
        self._filter = metric_filter
        self.url = url
        self.timeout = timeout
        self.retry_interval = retry_interval
        self._http_client = http_client
        self._clock = clock

        self._lock = threading.Lock()
        self._instance_id = instance_id
        self._last_attempt: Optional[float] = None
        self._attempted = False

    @property
    def instance_id(self) -> Optional[str]:
        """The resolved id, or None while still unresolved."""
        return self._instance_id

    @property
    def resolved(self) -> bool:
        return self._instance_id is not None

    def dimensions_for(self, name: str, sample: MetricSample) -> List[Dimension]:
        if not self._filter(name, sample):
            return []
        return self.runtime_dimensions()

    def runtime_dimensions(self) -> List[Dimension]:
        if self._instance_id is None and self._retry_due():
            self._try_resolve()
        return [Dimension(DIMENSION_NAME, self._instance_id or UNKNOWN_INSTANCE_ID)]

    def _retry_due(self) -> bool:
        if self._last_attempt is None:
            return True
        return self._clock() - self._last_attempt > self.retry_interval

    def _try_resolve(self) -> None:
        # Another thread is already looking the id up; report what we have.
        if not self._lock.acquire(blocking=False):
            return
        try:
            if self._instance_id is None and self._retry_due():
                self._fetch_instance_id()
        finally:
            self._lock.release()

    def _fetch_instance_id(self) -> None:
        try:
            response = self._get()
            if not response.is_success:
                if not self._attempted:
                    logger.warning(
                        f"Got bad response code {response.status_code} fetching instance id; "
                        f"will retry every {self.retry_interval:g}s until it succeeds. Metrics will be "
                        f"reported with the instance id '{UNKNOWN_INSTANCE_ID}' until then. "
                        f"If running outside EC2, pass an explicit instance_id instead."
                    )
                return

            lines = response.text.strip().splitlines()
            if not lines or not lines[0].strip():
                if not self._attempted:
                    logger.warning(
                        f"Metadata service returned an empty instance id; will retry every "
                        f"{self.retry_interval:g}s. If running outside EC2, pass an explicit instance_id instead."
                    )
                return

            self._instance_id = lines[0].strip()
            if self._attempted:
                logger.warning(
                    f"Succeeded fetching instance id '{self._instance_id}' after failure; "
                    f"the instance id will be correct now"
                )
            else:
                logger.info(f"Resolved instance id '{self._instance_id}'")
        except Exception as e:
            if not self._attempted:
                logger.warning(
                    f"Failed fetching instance id ({e}); will retry every {self.retry_interval:g}s "
                    f"until it succeeds. Metrics will be reported with the instance id "
                    f"'{UNKNOWN_INSTANCE_ID}' until then. If running outside EC2, pass an "
                    f"explicit instance_id instead."
                )
            else:
                logger.debug(f"Retry fetching instance id failed: {e}")
        finally:
            self._attempted = True
            self._last_attempt = self._clock()

    def _get(self) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.get(self.url, timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(self.url)

    def __repr__(self) -> str:
        return f"InstanceIdProvider(instance_id={self._instance_id!r}, url={self.url!r})"
