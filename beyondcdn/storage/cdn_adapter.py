"""Filesystem adapter backed by a BeyondCDN storage zone."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Union

from beyondcdn.core.errors import (
    ConfigurationError,
    ErrorKind,
    StorageError,
    TimestampParseError,
    classify_error,
)
from beyondcdn.storage.adapter import Metadata, StorageAdapter
from beyondcdn.storage.client import BeyondCDNClient
from beyondcdn.utils.paths import (
    join_url,
    normalize_path,
    prepend_prefix,
    remove_prefix,
    split_path,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S")


def parse_timestamp(value: str) -> int:
    """Convert a storage API timestamp (UTC, with or without fractional seconds) to epoch seconds."""
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except (TypeError, ValueError):
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp())
    raise TimestampParseError(f"Unrecognised timestamp: {value!r}")


class BeyondCDNAdapter(StorageAdapter):
    """Storage adapter exposing a BeyondCDN storage zone as a filesystem."""

    def __init__(self, client: BeyondCDNClient, pullzone_url: str = "", prefix: str = ""):
        """
        Initialize BeyondCDN adapter.

        Args:
            client: Client for the storage zone
            pullzone_url: Public pull zone URL, required by get_url()
            prefix: Path prefix scoping every operation to a subtree of the zone
        """
        self.client = client
        self.pullzone_url = pullzone_url
        self.prefix = prefix.strip("/")

    def _prepend_prefix(self, path: str) -> str:
        return prepend_prefix(path, self.prefix)

    def _remove_prefix(self, path: str) -> str:
        return remove_prefix(path, self.prefix)

    def _log_failure(self, operation: str, path: str, exc: Exception) -> None:
        logger.warning(
            f"[CDNAdapter] {operation} failed for {path} ({classify_error(exc).value}): {exc}",
            extra={"storage_zone": self.client.storage_zone_name, "path": path},
        )

    def write(self, path: str, contents: Union[bytes, str]) -> bool:
        path = self._prepend_prefix(path)
        try:
            self.client.upload(path, contents)
        except StorageError as exc:
            self._log_failure("write", path, exc)
            return False
        return True

    def update(self, path: str, contents: Union[bytes, str]) -> bool:
        return self.write(self._prepend_prefix(path), contents)

    def rename(self, path: str, newpath: str) -> bool:
        """
        Move a file by copying it and deleting the source.

        A destination written by a successful copy is kept when the delete fails.
        """
        path = self._prepend_prefix(path)
        newpath = self._prepend_prefix(newpath)
        if not self.copy(path, newpath):
            return False
        return self.delete(path)

    def copy(self, path: str, newpath: str) -> bool:
        path = self._prepend_prefix(path)
        newpath = self._prepend_prefix(newpath)
        source = self.read(path)
        if source is False:
            return False
        return self.write(newpath, source["contents"])

    def delete(self, path: str) -> bool:
        path = self._prepend_prefix(path)
        try:
            self.client.delete(path)
        except StorageError as exc:
            if exc.kind is ErrorKind.NOT_FOUND:
                return True
            self._log_failure("delete", path, exc)
            return False
        return True

    def delete_dir(self, dirname: str) -> bool:
        dirname = self._prepend_prefix(dirname)
        try:
            self.client.delete(f"{dirname.rstrip('/')}/")
        except StorageError as exc:
            self._log_failure("delete_dir", dirname, exc)
            return False
        return True

    def create_dir(self, dirname: str) -> bool:
        dirname = self._prepend_prefix(dirname)
        try:
            self.client.make_directory(dirname)
        except StorageError as exc:
            if exc.kind is ErrorKind.ALREADY_EXISTS:
                return True
            self._log_failure("create_dir", dirname, exc)
            return False
        return True

    def has(self, path: str) -> bool:
        return self.get_metadata(self._prepend_prefix(path)) is not False

    def read(self, path: str) -> Union[Metadata, bool]:
        path = self._prepend_prefix(path)
        metadata = self.get_metadata(path)
        if metadata is False:
            return False
        try:
            contents = self.client.download(path)
        except StorageError as exc:
            self._log_failure("read", path, exc)
            return False
        return {**metadata, "contents": contents}

    def read_stream(self, path: str) -> Union[Metadata, bool]:
        path = self._prepend_prefix(path)
        try:
            return {"stream": self.client.stream(path)}
        except StorageError as exc:
            self._log_failure("read_stream", path, exc)
            return False

    def list_contents(self, directory: str = "", recursive: bool = False) -> Union[List[Metadata], bool]:
        directory = self._prepend_prefix(directory)
        try:
            entries = self._list_directory(directory)
        except StorageError as exc:
            self._log_failure("list_contents", directory, exc)
            return False

        contents: List[Metadata] = []
        pending: List[Iterator[Metadata]] = [iter(entries)]
        while pending:
            item = next(pending[-1], None)
            if item is None:
                pending.pop()
                continue
            contents.append(item)
            if recursive and item["type"] == "dir":
                # Entry paths are prefix-stripped
                child = "/".join(part for part in (self.prefix, normalize_path(item["path"])) if part)
                try:
                    pending.append(iter(self._list_directory(child)))
                except StorageError as exc:
                    self._log_failure("list_contents", child, exc)
        return contents

    def _list_directory(self, directory: str) -> List[Metadata]:
        return [self._normalize_object(record) for record in self.client.list(directory)]

    def _strip_zone_and_prefix(self, remote_path: str, zone_name: str) -> str:
        """Turn a remote "/<zone>/<prefix>/a/b" path into the adapter-visible "a/b"."""
        path = normalize_path(remote_path)
        root = normalize_path(f"{zone_name}/{self.prefix}")
        if path == root:
            return ""
        if path.startswith(f"{root}/"):
            return path[len(root) + 1:]
        return path

    def _normalize_object(self, record: Dict[str, Any]) -> Metadata:
        zone_name = record["StorageZoneName"]
        last_changed = parse_timestamp(record["LastChanged"])
        return {
            "type": "dir" if record["IsDirectory"] else "file",
            "dirname": self._strip_zone_and_prefix(record["Path"], zone_name).rstrip("/"),
            "mimetype": record["ContentType"],
            "guid": record["Guid"],
            "path": "/" + self._strip_zone_and_prefix(record["Path"] + record["ObjectName"], zone_name),
            "object_name": record["ObjectName"],
            "size": record["Length"],
            "timestamp": last_changed,
            "server_id": record["ServerId"],
            "user_id": record["UserId"],
            "last_changed": last_changed,
            "date_created": parse_timestamp(record["DateCreated"]),
            "storage_zone_name": zone_name,
            "storage_zone_id": record["StorageZoneId"],
            "checksum": record["Checksum"],
            "replicated_zones": record["ReplicatedZones"],
        }

    def get_metadata(self, path: str) -> Union[Metadata, bool]:
        """Look a path up in its parent directory listing; False unless exactly one entry matches."""
        path = normalize_path(self._prepend_prefix(path))
        directory, _ = split_path(path)
        listing = self.list_contents(directory) or []
        target = self._remove_prefix(path)
        matches = [item for item in listing if normalize_path(item["path"]) == target]
        if len(matches) == 1:
            return matches[0]
        return False

    def get_size(self, path: str) -> Union[Metadata, bool]:
        """
        Look up a file's size.

        Returns the whole metadata record (read "size" from it), not a scalar.
        get_mimetype() and get_timestamp() behave the same way.
        """
        return self.get_metadata(self._prepend_prefix(path))

    def get_mimetype(self, path: str) -> Union[Metadata, bool]:
        return self.get_metadata(self._prepend_prefix(path))

    def get_timestamp(self, path: str) -> Union[Metadata, bool]:
        return self.get_metadata(self._prepend_prefix(path))

    def get_url(self, path: str) -> str:
        path = self._prepend_prefix(path)
        if not self.pullzone_url:
            raise ConfigurationError(
                "A pull zone URL is required to build public URLs; "
                "pass pullzone_url to BeyondCDNAdapter"
            )
        return join_url(self.pullzone_url, path)
