"""Launch composition and the end-to-end pipeline."""

from .game_launcher import GameLauncher, LaunchPlan, LaunchStrategy, Loader, Vanilla
from .pipeline import LaunchPipeline, PreparedLaunch, launch_version

__all__ = [
    "GameLauncher",
    "LaunchPipeline",
    "LaunchPlan",
    "LaunchStrategy",
    "Loader",
    "PreparedLaunch",
    "Vanilla",
    "launch_version",
]
