"""Kernel types shared across crossgate."""

from crossgate.kernel.exceptions import (
    ConfigurationException,
    CrossgateException,
    InvalidOriginException,
)

__all__ = [
    "ConfigurationException",
    "CrossgateException",
    "InvalidOriginException",
]
