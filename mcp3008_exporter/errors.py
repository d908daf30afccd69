# mcp3008_exporter/errors.py


class ExporterError(Exception):
    pass


class BusError(ExporterError):
    """The SPI transfer could not complete. Recoverable per collect cycle."""


class InitializationError(ExporterError):
    """The SPI bus could not be opened or configured. Fatal at startup."""
