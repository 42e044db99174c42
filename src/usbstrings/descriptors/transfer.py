"""
Control transfer plumbing.

Defines the device handle the descriptor readers talk to, and a handle
backed by a PyUSB device.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import usb.core

from usbstrings.descriptors.constants import (
    COMPLETION_TIMEOUT_MS,
    DESCRIPTOR_HEADER_LENGTH,
    LANGID_ENGLISH_US,
    SETUP_TIMEOUT_MS,
    DescriptorType,
    RequestType,
    StandardRequest,
    descriptor_value,
)
from usbstrings.descriptors.errors import TransferTimeout, TransportError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferTimeouts:
    """Per-transfer timeouts in milliseconds."""

    setup_ms: int = SETUP_TIMEOUT_MS
    completion_ms: int = COMPLETION_TIMEOUT_MS


DEFAULT_TIMEOUTS = TransferTimeouts()


@dataclass(frozen=True)
class ControlRequest:
    """A device-to-host control request (setup packet fields)."""

    request_type: int
    request: int
    value: int
    index: int
    length: int

    @classmethod
    def get_string_descriptor(
        cls,
        string_index: int,
        length: int,
        language_id: int = LANGID_ENGLISH_US,
    ) -> ControlRequest:
        """
        Build GET_DESCRIPTOR(STRING) for a string index.

        Args:
            string_index: String descriptor index
            length: Number of bytes to request (wLength)
            language_id: Language ID sent in wIndex

        Returns:
            ControlRequest ready to be issued
        """
        return cls(
            request_type=RequestType.DEVICE_TO_HOST_STANDARD_DEVICE,
            request=StandardRequest.GET_DESCRIPTOR,
            value=descriptor_value(DescriptorType.STRING, string_index),
            index=language_id,
            length=length,
        )

    @property
    def descriptor_index(self) -> int:
        """Descriptor index carried in the low byte of wValue."""
        return self.value & 0xFF

    @property
    def is_header_probe(self) -> bool:
        """True when only the descriptor header is requested."""
        return self.length == DESCRIPTOR_HEADER_LENGTH


@runtime_checkable
class DeviceHandle(Protocol):
    """
    Anything that can issue a blocking control transfer.

    Implementations raise TransferTimeout or TransportError when the
    transfer fails and otherwise return the bytes the device sent.
    """

    def control_transfer(
        self, request: ControlRequest, timeouts: TransferTimeouts
    ) -> bytes:
        ...


class PyUSBDevice:
    """
    DeviceHandle backed by a PyUSB device.

    PyUSB takes a single timeout per transfer, so the completion timeout,
    which bounds the whole transfer, is the one passed down.
    """

    def __init__(self, dev: Any) -> None:
        """
        Args:
            dev: usb.core.Device object
        """
        self.dev = dev

    @property
    def bus(self) -> int | None:
        return getattr(self.dev, "bus", None)

    @property
    def address(self) -> int | None:
        return getattr(self.dev, "address", None)

    def control_transfer(
        self, request: ControlRequest, timeouts: TransferTimeouts = DEFAULT_TIMEOUTS
    ) -> bytes:
        try:
            data = self.dev.ctrl_transfer(
                request.request_type,
                request.request,
                request.value,
                request.index,
                request.length,
                timeout=timeouts.completion_ms,
            )
        except usb.core.USBTimeoutError as e:
            raise TransferTimeout(
                f"Control transfer timed out after {timeouts.completion_ms} ms"
            ) from e
        except usb.core.USBError as e:
            raise TransportError(f"Control transfer failed: {e}") from e
        return bytes(data)

    def __repr__(self) -> str:
        return f"PyUSBDevice(bus={self.bus}, address={self.address})"
