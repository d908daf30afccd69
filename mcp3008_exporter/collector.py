# mcp3008_exporter/collector.py
import logging
import threading
from typing import List, Tuple

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily

from .config import FAILURE_METRIC, METRIC_PREFIX, NUM_CHANNELS
from .errors import BusError

log = logging.getLogger(__name__)


def _channel_descriptor(ch: int) -> GaugeMetricFamily:
    return GaugeMetricFamily(
        f"{METRIC_PREFIX}_{ch}",
        f"Current value of the MCP3008 channel {ch}",
    )


class Mcp3008Collector:
    """
    On-demand collector for prometheus_client registries.

    Every collect() does a fresh sweep of channels 0..7 on the reader,
    sequentially, while holding a lock, so two scrapes never interleave
    bus transactions. The call blocks until the 8 transfers finish or
    one of them raises BusError. A failed sweep emits no channel values
    at all (never a partial set) and the next scrape simply tries again.
    """
    def __init__(self, reader):
        self.reader = reader
        self.descs = [_channel_descriptor(ch) for ch in range(NUM_CHANNELS)]
        self.failures = 0
        self._lock = threading.Lock()

    def describe(self) -> List[GaugeMetricFamily]:
        # channel gauges only; the failure counter from collect() is not
        # listed, so the registry does not check its name for clashes
        return self.descs

    def sample(self) -> List[Tuple[GaugeMetricFamily, int]]:
        with self._lock:
            try:
                values = self.reader.read_all()
            except BusError as e:
                self.failures += 1
                log.warning("Failed to read MCP3008 channels: %s", e)
                return []
        return list(zip(self.descs, values))

    def collect(self):
        for desc, value in self.sample():
            yield GaugeMetricFamily(desc.name, desc.documentation, value=float(value))

        yield CounterMetricFamily(
            FAILURE_METRIC,
            "Scrapes where reading the MCP3008 channels failed",
            value=self.failures,
        )
