"""Mod loader support."""

from .fabric import FabricBootstrapper, LoaderState
from .models import LoaderProfile
from .mods import has_mods, installed_mod_files

__all__ = ["FabricBootstrapper", "LoaderProfile", "LoaderState", "has_mods", "installed_mod_files"]
