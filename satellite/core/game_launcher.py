"""Game launcher for Minecraft."""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from ..config import LauncherConfig
from ..errors import LaunchFailed
from ..modloaders.models import LoaderProfile
from ..versions.download_manager import client_jar_path
from ..versions.models import VersionDescriptor

logger = logging.getLogger(__name__)

ACCESS_TOKEN_PLACEHOLDER = "N/A"
USER_TYPE = "legacy"


@dataclass(frozen=True)
class Vanilla:
    pass


@dataclass(frozen=True)
class Loader:
    profile: LoaderProfile


LaunchStrategy = Union[Vanilla, Loader]


@dataclass
class LaunchPlan:
    java_executable: str
    jvm_args: List[str]
    classpath: List[Path]
    main_class: str
    game_args: List[str]
    game_dir: Path
    env: dict = field(default_factory=lambda: os.environ.copy(), repr=False)

    def command(self) -> List[str]:
        return [
            self.java_executable,
            *self.jvm_args,
            "-cp", os.pathsep.join(str(p) for p in self.classpath),
            self.main_class,
            *self.game_args,
        ]


class GameLauncher:
    def compose(self, config: LauncherConfig, descriptor: VersionDescriptor,
                strategy: LaunchStrategy, game_dir: Path) -> LaunchPlan:
        """Build the launch plan.

        Classpath order is loader libraries, vanilla libraries, then the
        client jar. Libraries with nothing to download are left out, and
        files are not re-checked here.
        """
        libraries_dir = game_dir / "libraries"
        classpath: List[Path] = []
        jvm_args = config.get_jvm_args()
        main_class = descriptor.main_class
        extra_game_args: List[str] = []

        if isinstance(strategy, Loader):
            profile = strategy.profile
            classpath.extend(libraries_dir / lib.relative_path for lib in profile.libraries)
            main_class = profile.main_class
            jvm_args.extend(profile.jvm_args)
            extra_game_args = list(profile.game_args)

        classpath.extend(libraries_dir / lib.relative_path for lib in descriptor.libraries if lib.download_url)
        classpath.append(client_jar_path(game_dir, descriptor.id))

        return LaunchPlan(
            java_executable=config.get_java_executable(),
            jvm_args=jvm_args,
            classpath=classpath,
            main_class=main_class,
            game_args=self.build_game_args(config, descriptor, game_dir) + extra_game_args,
            game_dir=game_dir,
        )

    def build_game_args(self, config: LauncherConfig, descriptor: VersionDescriptor,
                        game_dir: Path) -> List[str]:
        """Offline-mode game arguments."""
        return [
            "--username", config.player_name,
            "--version", descriptor.id,
            "--gameDir", str(game_dir),
            "--assetsDir", str(game_dir / "assets"),
            "--assetIndex", descriptor.asset_index.id,
            "--uuid", config.player_uuid or "",
            "--accessToken", ACCESS_TOKEN_PLACEHOLDER,
            "--userType", USER_TYPE,
            "--versionType", descriptor.type,
        ]

    def launch_game(self, plan: LaunchPlan) -> subprocess.Popen:
        """Start the game process; it is not waited on or supervised."""
        popen_args = {
            "args": plan.command(),
            "cwd": plan.game_dir,
            "env": plan.env,
            "stdin": subprocess.DEVNULL,
        }

        logger.debug("Launching: %s", " ".join(popen_args["args"]))
        try:
            plan.game_dir.mkdir(parents=True, exist_ok=True)
            process = subprocess.Popen(**popen_args)
        except OSError as e:
            raise LaunchFailed(f"{plan.java_executable}: {e.strerror or e}") from e

        logger.info("Minecraft started with pid %d", process.pid)
        return process
