"""Abstract filesystem adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Union

from beyondcdn.core.errors import UnsupportedOperationError

Metadata = Dict[str, Any]


class StorageAdapter(ABC):
    """
    Abstract interface for filesystem-style operations.

    Expected failures (missing files, rejected requests) are reported by
    returning False instead of raising.
    """

    @abstractmethod
    def write(self, path: str, contents: Union[bytes, str]) -> bool:
        """
        Write a file, replacing any existing content.

        Args:
            path: File path (e.g., "images/logo.png")
            contents: File contents

        Returns:
            True on success, False otherwise
        """
        pass

    @abstractmethod
    def update(self, path: str, contents: Union[bytes, str]) -> bool:
        """Update an existing file."""
        pass

    def write_stream(self, path: str, resource: BinaryIO) -> bool:
        """Write a file from a readable stream."""
        return self.write(path, resource.read())

    def update_stream(self, path: str, resource: BinaryIO) -> bool:
        """Update a file from a readable stream."""
        return self.update(path, resource.read())

    @abstractmethod
    def rename(self, path: str, newpath: str) -> bool:
        pass

    @abstractmethod
    def copy(self, path: str, newpath: str) -> bool:
        pass

    @abstractmethod
    def delete(self, path: str) -> bool:
        pass

    @abstractmethod
    def delete_dir(self, dirname: str) -> bool:
        pass

    @abstractmethod
    def create_dir(self, dirname: str) -> bool:
        pass

    @abstractmethod
    def has(self, path: str) -> bool:
        """
        Check if a file or directory exists.

        Args:
            path: File or directory path

        Returns:
            True if it exists, False otherwise
        """
        pass

    @abstractmethod
    def read(self, path: str) -> Union[Metadata, bool]:
        """
        Read a file.

        Returns:
            The file metadata with its content under the "contents" key, or False
        """
        pass

    @abstractmethod
    def read_stream(self, path: str) -> Union[Metadata, bool]:
        """
        Open a file for streaming.

        Returns:
            A dict holding the open handle under the "stream" key, or False.
            The caller owns the handle and must close it.
        """
        pass

    @abstractmethod
    def list_contents(self, directory: str = "", recursive: bool = False) -> Union[List[Metadata], bool]:
        pass

    @abstractmethod
    def get_metadata(self, path: str) -> Union[Metadata, bool]:
        pass

    @abstractmethod
    def get_size(self, path: str) -> Union[Metadata, bool]:
        pass

    @abstractmethod
    def get_mimetype(self, path: str) -> Union[Metadata, bool]:
        pass

    @abstractmethod
    def get_timestamp(self, path: str) -> Union[Metadata, bool]:
        pass

    def get_visibility(self, path: str) -> Union[Metadata, bool]:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not support visibility. Path: {path}"
        )

    def set_visibility(self, path: str, visibility: str) -> Union[Metadata, bool]:
        raise UnsupportedOperationError(
            f"{self.__class__.__name__} does not support visibility. Path: {path}, visibility: {visibility}"
        )
