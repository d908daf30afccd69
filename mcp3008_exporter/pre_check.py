# mcp3008_exporter/pre_check.py
"""
MCP3008 wiring check: print raw readings of all 8 channels.
Run before deploying the exporter (Ctrl+C to stop).
"""
import argparse
import sys
import time
from typing import Sequence

from . import config
from .adc_spi import open_reader
from .errors import BusError, InitializationError


def format_sweep(readings: Sequence[int]) -> str:
    return " ".join(f"CH{ch}={v:4d}" for ch, v in enumerate(readings))


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="MCP3008 wiring check")
    p.add_argument("--spi-port", default=config.SPI_PORT_DEFAULT)
    p.add_argument("--interval", type=float, default=0.1)
    p.add_argument("--once", action="store_true", help="print a single sweep and exit")
    args = p.parse_args(argv)

    try:
        reader = open_reader(*config.parse_spi_port(args.spi_port))
    except (ValueError, InitializationError) as e:
        print(f"[pre_check] {e}", file=sys.stderr)
        return 1

    print("MCP3008 test: CH0..CH7 (Ctrl+C to quit)\n")
    with reader:
        try:
            while True:
                ok = True
                try:
                    line = format_sweep(reader.read_all())
                except BusError as e:
                    ok = False
                    line = f"[error] {e}"
                if args.once:
                    print(line)
                    return 0 if ok else 1
                print(line, end="\r", flush=True)
                time.sleep(args.interval)
        except KeyboardInterrupt:
            print("\nbye")
    return 0


if __name__ == "__main__":
    sys.exit(main())
