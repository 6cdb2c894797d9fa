"""Stub REST service used as a fixture for route-extraction tooling."""

__version__ = "0.1.0"
