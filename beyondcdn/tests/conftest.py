from __future__ import annotations

import json
import logging
import re
from urllib.parse import unquote, urlsplit

import pytest
import responses

from beyondcdn.storage.cdn_adapter import BeyondCDNAdapter
from beyondcdn.storage.client import BeyondCDNClient

ZONE = "test-zone"
API_KEY = "secret-key"
BASE_URL = "https://storage.beyondcdn.com/"
PULLZONE_URL = "https://cdn.example.com/"
URL_PATTERN = re.compile(r"https://storage\.beyondcdn\.com/.*")

LAST_CHANGED = "2023-05-01T12:00:00.123456"
DATE_CREATED = "2023-05-01T11:00:00"


def _message(status: int, message: str) -> str:
    return json.dumps({"HttpCode": status, "Message": message})


class FakeStorageZone:
    """In-memory storage zone answering storage API requests through responses callbacks."""

    def __init__(self, zone: str = ZONE):
        self.zone = zone
        self.files: dict[str, bytes] = {}
        self.directories: set[str] = set()
        self.failures: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.last_changed = LAST_CHANGED
        self.date_created = DATE_CREATED

    def add_file(self, path: str, contents: bytes | str) -> None:
        key = path.strip("/")
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        self.files[key] = contents
        self._add_parents(key)

    def add_directory(self, path: str) -> None:
        key = path.strip("/")
        self.directories.add(key)
        self._add_parents(key)

    def fail(self, method: str, status: int) -> None:
        self.failures[method] = status

    def _add_parents(self, key: str) -> None:
        parent = key.rpartition("/")[0]
        while parent:
            self.directories.add(parent)
            parent = parent.rpartition("/")[0]

    def _is_child(self, key: str, directory: str) -> bool:
        prefix = f"{directory}/" if directory else ""
        rest = key[len(prefix):]
        return key.startswith(prefix) and rest != "" and "/" not in rest

    def _record(self, key: str, is_directory: bool) -> dict:
        directory, _, name = key.rpartition("/")
        return {
            "Guid": f"guid-{key}",
            "StorageZoneName": self.zone,
            "Path": f"/{self.zone}/{directory}/" if directory else f"/{self.zone}/",
            "ObjectName": name,
            "Length": 0 if is_directory else len(self.files[key]),
            "LastChanged": self.last_changed,
            "ServerId": 7,
            "ArrayNumber": 0,
            "IsDirectory": is_directory,
            "UserId": "user-1",
            "ContentType": "" if is_directory else "application/octet-stream",
            "DateCreated": self.date_created,
            "StorageZoneId": 42,
            "Checksum": None if is_directory else f"checksum-{key}",
            "ReplicatedZones": "NY,LA",
        }

    def children(self, directory: str) -> list[dict]:
        dirs = [self._record(d, True) for d in sorted(self.directories) if self._is_child(d, directory)]
        files = [self._record(f, False) for f in sorted(self.files) if self._is_child(f, directory)]
        return dirs + files

    def __call__(self, request):
        self.calls.append((request.method, request.url))
        if request.headers.get("AccessKey") != API_KEY:
            return 401, {}, _message(401, "Unauthorized")
        if request.method in self.failures:
            return self.failures[request.method], {}, _message(self.failures[request.method], "Injected failure")

        path = unquote(urlsplit(request.url).path)
        root = f"/{self.zone}/"
        if not path.startswith(root):
            return 404, {}, _message(404, "Storage zone not found")
        path = path[len(root):]
        is_directory = path == "" or path.endswith("/")
        key = path.strip("/")

        if request.method == "GET":
            return self._get(key, is_directory)
        if request.method == "PUT":
            return self._put(key, is_directory, request.body)
        if request.method == "DELETE":
            return self._delete(key, is_directory)
        return 405, {}, _message(405, "Method not allowed")

    def _get(self, key: str, is_directory: bool):
        if is_directory:
            if key and key not in self.directories:
                return 404, {}, _message(404, "Object Not Found")
            return 200, {"Content-Type": "application/json"}, json.dumps(self.children(key))
        if key not in self.files:
            return 404, {}, _message(404, "Object Not Found")
        return 200, {"Content-Type": "application/octet-stream"}, self.files[key]

    def _put(self, key: str, is_directory: bool, body):
        if is_directory:
            if key in self.directories:
                return 400, {}, _message(400, "Directory already exists")
            self.add_directory(key)
            return 201, {}, _message(201, "Directory created.")
        self.add_file(key, body or b"")
        return 201, {}, _message(201, "File uploaded.")

    def _delete(self, key: str, is_directory: bool):
        if is_directory:
            if key not in self.directories:
                return 404, {}, _message(404, "Object Not Found")
            if self.children(key):
                return 400, {}, _message(400, "Directory is not empty")
            self.directories.discard(key)
            return 200, {}, _message(200, "Directory deleted.")
        if key not in self.files:
            return 404, {}, _message(404, "Object Not Found")
        del self.files[key]
        return 200, {}, _message(200, "File deleted.")


@pytest.fixture
def storage_zone():
    zone = FakeStorageZone()
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        for method in (responses.GET, responses.PUT, responses.DELETE):
            rsps.add_callback(method, URL_PATTERN, callback=zone)
        yield zone


@pytest.fixture
def client() -> BeyondCDNClient:
    return BeyondCDNClient(ZONE, API_KEY)


@pytest.fixture
def adapter(client) -> BeyondCDNAdapter:
    return BeyondCDNAdapter(client, pullzone_url=PULLZONE_URL)


@pytest.fixture
def prefixed_adapter(client) -> BeyondCDNAdapter:
    return BeyondCDNAdapter(client, pullzone_url=PULLZONE_URL, prefix="media")


@pytest.fixture
def fresh_logger():
    """Hand out logger names and strip whatever setup_logger attached to them afterwards."""
    names = []

    def _make(name: str) -> str:
        names.append(name)
        return name

    yield _make

    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
