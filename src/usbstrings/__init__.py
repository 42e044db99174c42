"""
usb-strings - USB string descriptor reader.

Retrieves USB string descriptors over control transfers (length probe,
then payload fetch) and transcodes their UTF-16 payload to UTF-8, falling
back to a placeholder whenever a string cannot be read.
"""

__version__ = "0.1.0"
__author__ = "usb-strings Contributors"

from usbstrings.config import StringsConfig, load_config
from usbstrings.descriptors.resolver import ResolvedString, resolve_device_string

__all__ = [
    "ResolvedString",
    "StringsConfig",
    "load_config",
    "resolve_device_string",
    "__version__",
]
