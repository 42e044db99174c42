"""
Pytest configuration and shared fixtures for usb-strings tests.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml

from usbstrings.descriptors.errors import TransportError
from usbstrings.descriptors.transfer import ControlRequest, TransferTimeouts


def string_descriptor(text: str) -> bytes:
    """Build a well-formed string descriptor for text."""
    payload = text.encode("utf-16-le")
    return bytes([len(payload) + 2, 0x03]) + payload


class FakeDevice:
    """
    Scripted device handle.

    replies maps a string index to the full descriptor the device holds,
    or to an exception to raise. Each transfer returns at most wLength
    bytes of the scripted descriptor, like a real control pipe.
    """

    def __init__(self, replies: dict[int, bytes | Exception] | None = None) -> None:
        self.replies = replies or {}
        self.requests: list[ControlRequest] = []
        self.timeouts: list[TransferTimeouts] = []

    def control_transfer(
        self, request: ControlRequest, timeouts: TransferTimeouts
    ) -> bytes:
        self.requests.append(request)
        self.timeouts.append(timeouts)
        reply = self.replies.get(request.descriptor_index)
        if reply is None:
            raise TransportError("STALL")
        if isinstance(reply, Exception):
            raise reply
        return reply[: request.length]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample configuration file."""
    config_path = temp_dir / "usb-strings.yaml"
    config_data = {
        "logging": {"level": "debug"},
        "discovery": {"vendor_id": "0483", "product_id": "5740"},
        "transfer": {"completion_timeout_ms": 250},
        "display": {"placeholder": "N/A"},
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def probe_device() -> FakeDevice:
    """A device with manufacturer, product and serial strings."""
    return FakeDevice(
        {
            1: string_descriptor("Black Magic Debug"),
            2: string_descriptor("Black Magic Probe v2.0"),
            3: string_descriptor("7BB180B4"),
        }
    )
