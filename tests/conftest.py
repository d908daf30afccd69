import threading
import time

import pytest

from mcp3008_exporter.adc_spi import MCP3008Reader


class FakeSpi:
    """
    Stand-in for spidev.SpiDev talking to an MCP3008.

    Answers each xfer2 with the configured value of the addressed channel,
    with garbage in the bits the chip leaves undefined. Records overlapping
    transfers so tests can tell if two transactions were ever in flight.
    """
    def __init__(self, values=None, fail_on=None, delay=0.0):
        self.values = list(values) if values is not None else [ch * 100 for ch in range(8)]
        self.fail_on = fail_on
        self.delay = delay
        self.sent = []
        self.closed = 0
        self.overlaps = 0
        self._busy = False
        self._guard = threading.Lock()

    def xfer2(self, tx):
        with self._guard:
            if self._busy:
                self.overlaps += 1
            self._busy = True
        try:
            self.sent.append(list(tx))
            if self.delay:
                time.sleep(self.delay)
            ch = (tx[1] >> 4) & 0x07
            if self.fail_on is not None and ch == self.fail_on:
                raise OSError(110, "Connection timed out")
            v = self.values[ch]
            return [0xFF, 0xF8 | (v >> 8), v & 0xFF]
        finally:
            with self._guard:
                self._busy = False

    def close(self):
        self.closed += 1


@pytest.fixture
def fake_spi():
    return FakeSpi()


@pytest.fixture
def reader(fake_spi):
    return MCP3008Reader(fake_spi)
