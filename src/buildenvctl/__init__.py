"""buildenvctl — build environment resolution and signing keystore provisioning."""

__version__ = "0.3.0"
