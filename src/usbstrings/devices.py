"""
Device lookup and string summaries.

Finds devices by the configured VID:PID through PyUSB and resolves their
manufacturer, product and serial strings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import usb.core

from usbstrings.config import DiscoveryConfig, StringsConfig
from usbstrings.descriptors.resolver import ResolvedString, StringResolver
from usbstrings.descriptors.transfer import PyUSBDevice


logger = logging.getLogger(__name__)


@dataclass
class DeviceStrings:
    """The string fields of one USB device."""

    bus: int | None
    address: int | None
    vid: str  # Vendor ID (hex string)
    pid: str  # Product ID (hex string)
    manufacturer: ResolvedString
    product: ResolvedString
    serial: ResolvedString

    @property
    def device_id(self) -> str:
        """Get device location (bus:address)."""
        return f"{self.bus}:{self.address}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "bus": self.bus,
            "address": self.address,
            "vid": self.vid,
            "pid": self.pid,
            "manufacturer": self.manufacturer.value,
            "product": self.product.value,
            "serial": self.serial.value,
        }


def describe_device(dev: Any, config: StringsConfig | None = None) -> DeviceStrings:
    """
    Resolve the string fields of a PyUSB device.

    The three strings are read one after another; the control pipe only
    carries one transfer at a time.

    Args:
        dev: usb.core.Device object
        config: Transfer and display settings

    Returns:
        DeviceStrings with each field resolved or set to the sentinel.
    """
    config = config or StringsConfig()
    handle = PyUSBDevice(dev)
    resolver = StringResolver(
        handle,
        placeholder=config.display.placeholder,
        language_id=config.transfer.language_id,
        timeouts=config.transfer.timeouts,
    )
    return DeviceStrings(
        bus=handle.bus,
        address=handle.address,
        vid=f"{dev.idVendor:04x}",
        pid=f"{dev.idProduct:04x}",
        manufacturer=resolver.resolve(dev.iManufacturer),
        product=resolver.resolve(dev.iProduct),
        serial=resolver.resolve(dev.iSerialNumber),
    )


class DeviceEnumerator:
    """
    Finds devices matching a DiscoveryConfig.

    The VID:PID to match is passed in, never read from module state.
    """

    def __init__(self, config: StringsConfig | None = None) -> None:
        self.config = config or StringsConfig()

    @property
    def discovery(self) -> DiscoveryConfig:
        return self.config.discovery

    def find(self) -> list[Any]:
        """
        Find all connected devices with the configured VID:PID.

        Returns:
            List of usb.core.Device objects.

        Raises:
            usb.core.NoBackendError: If no libusb backend is available
        """
        try:
            return list(
                usb.core.find(
                    find_all=True,
                    idVendor=self.discovery.vendor_id,
                    idProduct=self.discovery.product_id,
                )
            )
        except usb.core.NoBackendError:
            logger.error("No USB backend available. Install libusb.")
            raise

    def describe_all(self) -> list[DeviceStrings]:
        """
        Find matching devices and resolve their strings.

        Returns:
            List of DeviceStrings, one per matching device.
        """
        devices = []
        for dev in self.find():
            device = describe_device(dev, self.config)
            logger.debug(
                "Read strings of %04x:%04x at %s",
                dev.idVendor, dev.idProduct, device.device_id,
            )
            devices.append(device)
        return devices
