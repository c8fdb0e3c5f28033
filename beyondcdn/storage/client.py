"""HTTP client for a single BeyondCDN storage zone."""

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO, Dict, List

import requests

from beyondcdn.core.errors import (
    DirectoryExistsError,
    DirectoryNotEmptyError,
    NotFoundError,
    StorageError,
    error_for_status,
)
from beyondcdn.storage.regions import Region, get_base_url
from beyondcdn.utils.paths import normalize_path

logger = logging.getLogger(__name__)


def _status_of(exc: requests.RequestException) -> int | None:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    return response.status_code


def _decode(response: requests.Response) -> Any:
    """Decode a response body as JSON when possible, otherwise keep the raw bytes."""
    content = response.content
    if not content:
        return content
    try:
        return json.loads(content)
    except ValueError:
        return content


class BeyondCDNClient:
    """Stateless HTTP facade over one storage zone in one region."""

    def __init__(
        self,
        storage_zone_name: str,
        api_key: str,
        region: Region | str | None = Region.FALKENSTEIN,
        session: requests.Session | None = None,
    ):
        """
        Initialize storage client.

        Args:
            storage_zone_name: Name of the storage zone (e.g., "my-assets")
            api_key: Storage zone password, sent as the AccessKey header
            region: Storage region; unknown values fall back to the default endpoint
            session: Optional requests session to send requests through
        """
        self.storage_zone_name = storage_zone_name
        self._api_key = api_key
        self.region = region
        self.session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return get_base_url(self.region)

    def _url(self, path: str) -> str:
        zone = normalize_path(f"/{self.storage_zone_name}/")
        return f"{self.base_url}{zone}/{path.lstrip('/')}"

    def _headers(self, extra: Dict[str, str] | None = None) -> Dict[str, str]:
        headers = {
            "Accept": "*/*",
            "AccessKey": self._api_key,
        }
        if extra:
            headers.update(extra)
        return headers

    def _send(
        self,
        path: str,
        method: str = "GET",
        headers: Dict[str, str] | None = None,
        **kwargs,
    ) -> requests.Response:
        url = self._url(path)
        logger.debug(
            f"[CDNClient] {method} {url}",
            extra={"storage_zone": self.storage_zone_name, "path": path},
        )
        response = self.session.request(method, url, headers=self._headers(headers), **kwargs)
        try:
            response.raise_for_status()
        except requests.HTTPError:
            # Streamed error responses would otherwise hold their connection
            response.close()
            raise
        return response

    def _request(self, path: str, method: str = "GET", **kwargs) -> Any:
        return _decode(self._send(path, method, **kwargs))

    def list(self, path: str) -> List[Dict[str, Any]]:
        """
        List the immediate children of a directory.

        Raises:
            NotFoundError: If the directory does not exist or the path is a file
            StorageError: On any other failure
        """
        try:
            listing = self._request(f"{normalize_path(path)}/")
        except requests.RequestException as exc:
            raise error_for_status(_status_of(exc), str(exc)) from exc

        if not isinstance(listing, list):
            raise NotFoundError("File is not a directory")
        return listing

    def download(self, path: str) -> bytes:
        """
        Download the full contents of a file.

        A body that decodes to a JSON document is handed back re-serialized.
        """
        try:
            response = self._send(f"{path}?download")
        except requests.RequestException as exc:
            raise error_for_status(_status_of(exc), str(exc)) from exc

        content = _decode(response)
        if isinstance(content, (list, dict)):
            return json.dumps(content).encode("utf-8")
        return response.content

    def stream(self, path: str) -> BinaryIO:
        """Open a readable handle on a file without buffering it. The caller must close it."""
        try:
            response = self._send(path, stream=True)
        except requests.RequestException as exc:
            raise error_for_status(_status_of(exc), str(exc)) from exc
        # Undo any Content-Encoding so callers read the stored bytes
        response.raw.decode_content = True
        return response.raw

    def upload(self, path: str, contents: bytes | str) -> Any:
        try:
            return self._request(
                path,
                "PUT",
                headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
                data=contents,
            )
        except requests.RequestException as exc:
            raise StorageError(str(exc), _status_of(exc)) from exc

    def make_directory(self, path: str) -> Any:
        """
        Create an empty directory marker.

        Raises:
            DirectoryExistsError: If the storage API rejects the request with a 400
            StorageError: On any other failure
        """
        try:
            return self._request(
                f"{normalize_path(path)}/",
                "PUT",
                headers={"Content-Length": "0"},
                data=b"",
            )
        except requests.RequestException as exc:
            status_code = _status_of(exc)
            if status_code == 400:
                raise DirectoryExistsError() from exc
            raise StorageError(str(exc), status_code) from exc

    def delete(self, path: str) -> Any:
        """Delete a file, or a directory when the path ends with a slash."""
        try:
            return self._request(path, "DELETE")
        except requests.RequestException as exc:
            raise error_for_status(_status_of(exc), str(exc), on_bad_request=DirectoryNotEmptyError) from exc
