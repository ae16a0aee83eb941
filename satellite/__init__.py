"""Satellite: resolve, fetch and launch Minecraft versions."""

__version__ = "0.3.0"
