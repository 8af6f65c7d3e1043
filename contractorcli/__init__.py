"""Command line client for the Contractor provisioning server."""

__version__ = "0.1.0"
