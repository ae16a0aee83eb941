"""Maven coordinate helpers."""

from ..errors import MalformedCoordinate


def library_path(coordinate: str) -> str:
    """Map ``group:artifact:version`` to its repository-relative jar path.

    ``net.fabricmc:fabric-loader:0.15.11`` becomes
    ``net/fabricmc/fabric-loader/0.15.11/fabric-loader-0.15.11.jar``.
    """
    parts = coordinate.split(":")
    if len(parts) != 3 or not all(parts):
        raise MalformedCoordinate(coordinate)

    group, artifact, version = parts
    return f"{group.replace('.', '/')}/{artifact}/{version}/{artifact}-{version}.jar"


def library_url(base_url: str, coordinate: str) -> str:
    """Join a maven repository base URL with the coordinate's jar path."""
    if not base_url.endswith("/"):
        base_url += "/"
    return base_url + library_path(coordinate)
