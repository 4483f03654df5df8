"""
Command-line front end for portprobe.

Loads the configuration, runs a connectivity test (or lists the configured
ports) and prints the JSON response to stdout. Logging goes to stderr.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__, configuration
from .controller import ProbeController

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portprobe",
        description="Measure TCP connect latency and jitter to a host's well-known ports",
    )
    parser.add_argument("--version", action="version", version=f"portprobe {__version__}")
    parser.add_argument("--config", help="Path to config.yaml (created with defaults if missing)")
    parser.add_argument("--host", help="Override the configured server host")
    parser.add_argument("--client-ip", help="Client address to echo back in the response")
    parser.add_argument(
        "--list-ports", action="store_true", help="Print the configured ports without probing"
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (0 for compact)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every connection attempt")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    """The main entry point for the application."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    config = configuration.load_or_create_config(args.config)
    if args.host:
        config['server_host'] = args.host

    try:
        controller = ProbeController(config)
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        return 2

    if args.list_ports:
        response = controller.describe(client_ip=args.client_ip)
    else:
        response = controller.run(client_ip=args.client_ip)

    print(json.dumps(response, indent=args.indent or None, ensure_ascii=False))
    return 0 if response.get('success', True) else 1
