# mcp3008_exporter/config.py
import os
import re
from typing import Tuple

# SPI (fixed, not runtime-configurable)
SPI_MAX_SPEED_HZ = 1_000_000
SPI_MODE = 0
SPI_BITS_PER_WORD = 8

# MCP3008: 8ch / 10bit
NUM_CHANNELS = 8
RESOLUTION_BITS = 10
MAX_READING = (1 << RESOLUTION_BITS) - 1  # 1023

METRIC_PREFIX = "mcp3008_channel"
FAILURE_METRIC = "mcp3008_read_failures"

# -----------------------------
# Defaults (env overridable)
# -----------------------------
SPI_PORT_DEFAULT = os.getenv("MCP3008_SPI_PORT", "0.0")
EXPORTER_HOST = os.getenv("EXPORTER_HOST", "0.0.0.0")
EXPORTER_PORT = int(os.getenv("EXPORTER_PORT", "8088"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_PORT_RE = re.compile(r"^(?:/dev/spidev|spi)?(\d+)[.,](\d+)$", re.IGNORECASE)


def parse_spi_port(port: str) -> Tuple[int, int]:
    """
    SPI port name -> (bus, device).

    "0.1", "0,1", "SPI0.1" and "/dev/spidev0.1" are all bus=0 device=1.
    An empty name picks the first port (0, 0).
    """
    s = (port or "").strip()
    if not s:
        return 0, 0
    m = _PORT_RE.match(s)
    if m is None:
        raise ValueError(f"invalid SPI port: {port!r}")
    return int(m.group(1)), int(m.group(2))
