"""Shared fixtures: a local aiohttp server standing in for Mojang and Fabric."""

import hashlib
import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from satellite.config import LauncherConfig
from satellite.core.pipeline import LaunchPipeline
from satellite.utils.async_http import AsyncHTTPClient
from satellite.utils.events import EventEmitter, EventKind, LauncherEvent
from satellite.utils.maven import library_path

MC_VERSION = "1.20.1"
VANILLA_MAIN = "net.minecraft.client.main.Main"
FABRIC_MAIN = "net.fabricmc.loader.impl.launch.knot.KnotClient"
LOADER_VERSION = "0.15.11"


def sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


class FakeUpstream:
    """Serves registered bodies by path and counts every request."""

    def __init__(self):
        self.routes: Dict[str, tuple] = {}
        self.hits: Counter = Counter()
        self.base_url = ""

    def url(self, path: str) -> str:
        return self.base_url + path

    def add(self, path: str, body: bytes, status: int = 200):
        self.routes[path] = (status, body)

    def add_json(self, path: str, data):
        self.add(path, json.dumps(data).encode())

    def remove(self, path: str):
        self.routes.pop(path, None)

    async def handle(self, request: web.Request) -> web.Response:
        self.hits[request.path] += 1
        if request.path not in self.routes:
            return web.Response(status=404)
        status, body = self.routes[request.path]
        return web.Response(status=status, body=body)


@pytest_asyncio.fixture
async def upstream():
    fake = FakeUpstream()
    app = web.Application()
    app.router.add_route("GET", "/{tail:.*}", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.base_url = str(server.make_url("/")).rstrip("/")
    yield fake
    await server.close()


@pytest_asyncio.fixture
async def http():
    async with AsyncHTTPClient(timeout=10) as client:
        yield client


@dataclass
class VanillaRelease:
    version_id: str
    manifest_url: str
    resources_url: str
    client_jar: bytes
    libraries: Dict[str, bytes]
    assets: Dict[str, bytes]
    document: dict = field(repr=False, default_factory=dict)

    def asset_path(self, name: str) -> str:
        digest = sha1(self.assets[name])
        return f"/objects/{digest[:2]}/{digest}"


def publish_vanilla(upstream: FakeUpstream, version_id: str = MC_VERSION) -> VanillaRelease:
    client_jar = b"client jar for " + version_id.encode()
    libraries = {
        "com.mojang:brigadier:1.1.8": b"brigadier classes",
        "org.slf4j:slf4j-api:2.0.7": b"slf4j classes",
    }
    assets = {
        "minecraft/sounds/ambient/cave/cave1.ogg": b"cave sound",
        "minecraft/lang/en_us.json": b'{"menu.play": "Play"}',
        "icons/icon_16x16.png": b"tiny icon",
    }

    library_docs = []
    for name, body in libraries.items():
        path = library_path(name)
        upstream.add(f"/libraries/{path}", body)
        library_docs.append({
            "name": name,
            "downloads": {"artifact": {"path": path, "url": upstream.url(f"/libraries/{path}"),
                                       "sha1": sha1(body), "size": len(body)}},
        })
    # Filtered out by its OS rule, and a library with nothing to download.
    library_docs.append({
        "name": "org.lwjgl:lwjgl:3.3.1:natives-nowhere",
        "downloads": {"artifact": {"path": "org/lwjgl/lwjgl/3.3.1/lwjgl-3.3.1-natives-nowhere.jar",
                                   "url": upstream.url("/libraries/natives-nowhere.jar")}},
        "rules": [{"action": "allow", "os": {"name": "nowhere-os"}}],
    })
    library_docs.append({"name": "ca.weblite:java-objc-bridge:1.1"})

    index = {"objects": {name: {"hash": sha1(body), "size": len(body)} for name, body in assets.items()}}
    index_body = json.dumps(index).encode()
    upstream.add(f"/indexes/{version_id}.json", index_body)
    for name, body in assets.items():
        digest = sha1(body)
        upstream.add(f"/objects/{digest[:2]}/{digest}", body)

    upstream.add(f"/client/{version_id}.jar", client_jar)

    document = {
        "id": version_id,
        "type": "release",
        "mainClass": VANILLA_MAIN,
        "libraries": library_docs,
        "downloads": {"client": {"url": upstream.url(f"/client/{version_id}.jar"),
                                 "sha1": sha1(client_jar), "size": len(client_jar)}},
        "assetIndex": {"id": version_id, "url": upstream.url(f"/indexes/{version_id}.json"),
                       "sha1": sha1(index_body)},
    }
    upstream.add_json(f"/v1/packages/{version_id}.json", document)
    upstream.add_json("/mc/game/version_manifest.json", {
        "latest": {"release": version_id, "snapshot": "23w31a"},
        "versions": [
            {"id": "23w31a", "type": "snapshot", "url": upstream.url("/v1/packages/23w31a.json")},
            {"id": version_id, "type": "release", "url": upstream.url(f"/v1/packages/{version_id}.json")},
            {"id": "b1.7.3", "type": "old_beta", "url": upstream.url("/v1/packages/b1.7.3.json")},
        ],
    })

    return VanillaRelease(
        version_id=version_id,
        manifest_url=upstream.url("/mc/game/version_manifest.json"),
        resources_url=upstream.url("/objects"),
        client_jar=client_jar,
        libraries=libraries,
        assets=assets,
        document=document,
    )


@dataclass
class FabricRelease:
    meta_url: str
    loader_version: str
    libraries: Dict[str, bytes]
    list_path: str
    profile_path: str


def publish_fabric(upstream: FakeUpstream, mc_version: str = MC_VERSION) -> FabricRelease:
    libraries = {
        f"net.fabricmc:fabric-loader:{LOADER_VERSION}": b"fabric loader classes",
        "org.ow2.asm:asm:9.6": b"asm classes",
    }
    library_docs = []
    for name, body in libraries.items():
        upstream.add(f"/maven/{library_path(name)}", body)
        library_docs.append({"name": name, "url": upstream.url("/maven/"), "sha1": sha1(body)})

    list_path = "/fabric/v2/versions/loader"
    profile_path = f"/fabric/v2/versions/loader/{mc_version}/{LOADER_VERSION}/profile/json"
    upstream.add_json(list_path, [
        {"separator": ".", "build": 11, "maven": f"net.fabricmc:fabric-loader:{LOADER_VERSION}",
         "version": LOADER_VERSION, "stable": True},
        {"separator": ".", "build": 10, "maven": "net.fabricmc:fabric-loader:0.15.10",
         "version": "0.15.10", "stable": True},
    ])
    upstream.add_json(profile_path, {
        "id": f"fabric-loader-{LOADER_VERSION}-{mc_version}",
        "inheritsFrom": mc_version,
        "type": "release",
        "mainClass": FABRIC_MAIN,
        "arguments": {"game": [], "jvm": ["-DFabricMcEmu= net.minecraft.client.main.Main "]},
        "libraries": library_docs,
    })
    return FabricRelease(
        meta_url=upstream.url("/fabric/v2"),
        loader_version=LOADER_VERSION,
        libraries=libraries,
        list_path=list_path,
        profile_path=profile_path,
    )


@pytest.fixture
def vanilla(upstream) -> VanillaRelease:
    return publish_vanilla(upstream)


@pytest.fixture
def fabric(upstream) -> FabricRelease:
    return publish_fabric(upstream)


@pytest.fixture
def game_dir(tmp_path) -> Path:
    path = tmp_path / "minecraft"
    path.mkdir()
    return path


@pytest.fixture
def config(game_dir) -> LauncherConfig:
    return LauncherConfig(game_directory=str(game_dir), java_executable="java",
                          player_name="Steve", concurrent_downloads=4)


class EventLog(list):
    def of(self, kind: EventKind) -> List[LauncherEvent]:
        return [e for e in self if e.kind is kind]


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def pipeline(http, vanilla, fabric, events) -> LaunchPipeline:
    return LaunchPipeline(
        http,
        events=EventEmitter(events.append),
        manifest_url=vanilla.manifest_url,
        resources_url=vanilla.resources_url,
        fabric_meta_url=fabric.meta_url,
    )
