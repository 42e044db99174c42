"""
usb-strings Command Line Interface.

Provides commands for reading USB string descriptors:
- list: Find matching devices and show their strings
- decode: Decode a raw string descriptor given as hex
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import usb.core

from usbstrings import __version__
from usbstrings.config import StringsConfig, load_config, validate_config
from usbstrings.descriptors.errors import DescriptorError
from usbstrings.descriptors.strings import DescriptorHeader
from usbstrings.descriptors.unicode import text_units, utf16_to_utf8, utf16le_units
from usbstrings.devices import DeviceEnumerator


logger = logging.getLogger("usbstrings")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="usb-strings",
        description="Read and decode USB string descriptors",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List matching devices")
    list_parser.add_argument(
        "--vid",
        help="Vendor ID (hex, default from config)",
    )
    list_parser.add_argument(
        "--pid",
        help="Product ID (hex, default from config)",
    )
    list_parser.set_defaults(func=cmd_list)

    # decode command
    decode_parser = subparsers.add_parser(
        "decode", help="Decode a raw string descriptor"
    )
    decode_parser.add_argument(
        "descriptor",
        help="Descriptor bytes as hex, e.g. 06 03 48 00 69 00",
        nargs="+",
    )
    decode_parser.set_defaults(func=cmd_decode)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 1

    setup_logging(config, args.verbose)
    return args.func(args, config)


def setup_logging(config: StringsConfig, verbose: bool = False) -> None:
    """Configure logging based on config."""
    level_name = "debug" if verbose else config.logging.level
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def output(data: Any, args: argparse.Namespace) -> None:
    """Output data in requested format."""
    if getattr(args, "json", False):
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        for key, value in data.items():
            print(f"{key}: {value}")
    else:
        print(data)


def cmd_list(args: argparse.Namespace, config: StringsConfig) -> int:
    """Find matching devices and show their strings."""
    try:
        if args.vid:
            config.discovery.vendor_id = int(args.vid, 16)
        if args.pid:
            config.discovery.product_id = int(args.pid, 16)
    except ValueError as e:
        print(f"Invalid ID: {e}", file=sys.stderr)
        return 1

    logger.debug(
        "Looking up %04x:%04x",
        config.discovery.vendor_id, config.discovery.product_id,
    )
    enumerator = DeviceEnumerator(config)
    try:
        devices = enumerator.describe_all()
    except usb.core.NoBackendError:
        print("No USB backend available. Install libusb.", file=sys.stderr)
        return 1

    if not devices:
        print(
            f"No devices found matching "
            f"{config.discovery.vendor_id:04x}:{config.discovery.product_id:04x}"
        )
        return 1

    if getattr(args, "json", False):
        output([d.to_dict() for d in devices], args)
        return 0

    print(f"USB Devices ({len(devices)} found)")
    print("=" * 70)
    print(f"{'Bus:Addr':<10} {'VID:PID':<11} {'Manufacturer':<18} {'Product':<18} Serial")
    print("-" * 70)
    for device in devices:
        print(
            f"{device.device_id:<10} "
            f"{device.vid}:{device.pid}  "
            f"{device.manufacturer.text[:18]:<18} "
            f"{device.product.text[:18]:<18} "
            f"{device.serial.text}"
        )
    return 0


def cmd_decode(args: argparse.Namespace, config: StringsConfig) -> int:
    """Decode a raw string descriptor."""
    try:
        raw = bytes.fromhex("".join(args.descriptor))
    except ValueError as e:
        print(f"Invalid hex: {e}", file=sys.stderr)
        return 1

    try:
        header = DescriptorHeader.parse(raw)
        payload = raw[2:header.length] if header.length >= 2 else b""
        units = text_units(utf16le_units(payload))
        text = utf16_to_utf8(units).decode("utf-8")
    except DescriptorError as e:
        print(f"Cannot decode descriptor: {e}", file=sys.stderr)
        return 1

    output(
        {
            "length": header.length,
            "code_units": len(units),
            "text": text,
        },
        args,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
