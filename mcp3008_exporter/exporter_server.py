# mcp3008_exporter/exporter_server.py
import argparse
import asyncio
import logging
import sys
from typing import Optional

from aiohttp import web
from prometheus_client import (
    CollectorRegistry,
    CONTENT_TYPE_LATEST,
    GCCollector,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from . import config
from .adc_spi import open_reader
from .collector import Mcp3008Collector
from .errors import InitializationError

log = logging.getLogger(__name__)

LANDING_PAGE = """<html>
<head><title>MCP3008 Exporter</title></head>
<body>
<h1>MCP3008 Exporter</h1>
<p><a href="/metrics">Metrics</a></p>
</body>
</html>
"""


# -----------------------------
# Handlers
# -----------------------------
async def handle_metrics(request: web.Request) -> web.Response:
    registry = request.app["registry"]
    # the sweep blocks on the SPI bus; keep it off the event loop
    loop = asyncio.get_running_loop()
    output = await loop.run_in_executor(None, generate_latest, registry)
    return web.Response(body=output, headers={"Content-Type": CONTENT_TYPE_LATEST})


async def handle_index(request: web.Request) -> web.Response:
    return web.Response(text=LANDING_PAGE, content_type="text/html")


async def _on_shutdown(app: web.Application):
    log.info("Received interrupt signal, exiting...")


def build_app(collector: Mcp3008Collector, registry: Optional[CollectorRegistry] = None) -> web.Application:
    if registry is None:
        registry = CollectorRegistry()
        # process_*, python_info and python_gc_* alongside the channels
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)
    registry.register(collector)

    app = web.Application()
    app["registry"] = registry
    app["collector"] = collector
    app.router.add_get("/", handle_index)
    app.router.add_get("/metrics", handle_metrics)
    app.on_shutdown.append(_on_shutdown)
    return app


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Prometheus exporter for an MCP3008 ADC on SPI")
    p.add_argument(
        "--spi-port", "--port-spi",
        dest="spi_port",
        default=config.SPI_PORT_DEFAULT,
        help='SPI port to use: "0.0", "SPI0.1" or "/dev/spidev0.1" (default: first port)',
    )
    p.add_argument("--host", default=config.EXPORTER_HOST)
    p.add_argument("--port", type=int, default=config.EXPORTER_PORT)
    p.add_argument(
        "--log", "-l",
        default=config.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)",
    )
    return p


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log),
        format=config.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        bus, device = config.parse_spi_port(args.spi_port)
        reader = open_reader(bus, device)
    except (ValueError, InitializationError) as e:
        log.error("Startup failed: %s", e)
        return 1

    with reader:
        app = build_app(Mcp3008Collector(reader))
        log.info(
            "Server is starting... host=%s port=%d spi=%d.%d",
            args.host, args.port, bus, device,
        )
        # run_app stops on SIGINT/SIGTERM
        web.run_app(app, host=args.host, port=args.port, print=None)

    log.info("Exporter stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
