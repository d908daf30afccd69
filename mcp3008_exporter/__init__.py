# mcp3008_exporter/__init__.py
"""Prometheus exporter for the 8 channels of an MCP3008 ADC on SPI."""

__version__ = "0.1.0"
