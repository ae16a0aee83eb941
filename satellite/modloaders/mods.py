"""Detection of installed mod files."""

from pathlib import Path
from typing import List

import aiofiles.os


def mods_dir(game_dir: Path) -> Path:
    return game_dir / "mods"


async def installed_mod_files(game_dir: Path) -> List[Path]:
    """Enabled mod jars in ``<game_dir>/mods``; ``*.jar.disabled`` files are skipped."""
    directory = mods_dir(game_dir)
    if not await aiofiles.os.path.isdir(directory):
        return []
    mods = []
    for name in sorted(await aiofiles.os.listdir(directory)):
        path = directory / name
        if path.suffix == ".jar" and await aiofiles.os.path.isfile(path):
            mods.append(path)
    return mods


async def has_mods(game_dir: Path) -> bool:
    return bool(await installed_mod_files(game_dir))
