# mcp3008_exporter/adc_spi.py
"""
MCP3008 (SPI) 10bit ADC reader.

One channel read is one full-duplex xfer2 of 3 bytes:

    tx: [0x01, (SGL | ch) << 4, 0x00]
    rx: [ -- , ....._ _ b9 b8, b7..b0 ]

bus=0, device=0 is SPI0 CE0 (/dev/spidev0.0).
"""
import logging
from typing import List

from .config import (
    NUM_CHANNELS,
    MAX_READING,
    SPI_MAX_SPEED_HZ,
    SPI_MODE,
    SPI_BITS_PER_WORD,
)
from .errors import BusError, InitializationError

log = logging.getLogger(__name__)

START_BYTE = 0x01
SINGLE_ENDED = 0x08


def build_command(channel: int) -> List[int]:
    return [START_BYTE, ((SINGLE_ENDED + channel) << 4) & 0xFF, 0x00]


def decode_reading(byte1: int, byte2: int) -> int:
    # only the low 2 bits of byte1 belong to the result
    return ((byte1 & 0x03) << 8) | (byte2 & 0xFF)


class MCP3008Reader:
    """
    Reads 10bit values (0..1023) from an MCP3008.

    `spi` is an already opened SpiDev (or anything with xfer2/close).
    Not thread safe: the bus allows a single transaction in flight, so
    callers must serialize read_channel/read_all.
    """
    def __init__(self, spi):
        self.spi = spi
        self._closed = False

    def read_channel(self, ch: int) -> int:
        try:
            r = self.spi.xfer2(build_command(ch))
        except OSError as e:
            raise BusError(f"SPI transfer failed on channel {ch}: {e}") from e
        if r is None or len(r) < 3:
            raise BusError(f"short SPI response on channel {ch}: {r!r}")
        return decode_reading(r[1], r[2])

    def read_all(self) -> List[int]:
        return [self.read_channel(ch) for ch in range(NUM_CHANNELS)]

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.spi.close()
        log.info("SPI bus released")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def open_reader(bus: int = 0, device: int = 0, max_speed_hz: int = SPI_MAX_SPEED_HZ) -> MCP3008Reader:
    """
    Open /dev/spidev<bus>.<device> at 1MHz mode 0 and wrap it.
    Raises InitializationError when the bus cannot be opened or configured.
    """
    try:
        import spidev
    except ImportError as e:
        raise InitializationError(f"spidev is not available: {e}") from e

    spi = spidev.SpiDev()
    try:
        spi.open(bus, device)
    except OSError as e:
        raise InitializationError(f"cannot open SPI bus {bus}.{device}: {e}") from e

    try:
        spi.max_speed_hz = max_speed_hz
        spi.mode = SPI_MODE
        spi.bits_per_word = SPI_BITS_PER_WORD
    except (OSError, TypeError, ValueError) as e:
        spi.close()
        raise InitializationError(f"cannot configure SPI bus {bus}.{device}: {e}") from e

    log.info(
        "SPI bus %d.%d open (speed=%dHz mode=%d range=0..%d)",
        bus, device, max_speed_hz, SPI_MODE, MAX_READING,
    )
    return MCP3008Reader(spi)
