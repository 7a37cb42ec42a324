"""Relay bridge: configuration core for a multi-protocol chat relay."""

__version__ = "0.1.0"
