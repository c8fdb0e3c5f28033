import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from beyondcdn.core.logging import setup_logger
from beyondcdn.storage.regions import parse_region


def _load_dotenv() -> None:
    # Real environment variables always win over .env values
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)


@dataclass(frozen=True)
class Config:
    # Storage zone
    storage_zone_name: str
    api_key: str
    region: str = "de"

    # Adapter
    pullzone_url: str = ""
    path_prefix: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"
    log_file_path: str | None = None

    def validate(self) -> None:
        if not self.storage_zone_name.strip():
            raise ValueError("BEYONDCDN_STORAGE_ZONE is required")

        if not self.api_key.strip():
            raise ValueError("BEYONDCDN_API_KEY is required")

        if parse_region(self.region) is None:
            raise ValueError(f"BEYONDCDN_REGION is not a known region: {self.region}")

        if self.pullzone_url and not self.pullzone_url.startswith(("http://", "https://")):
            raise ValueError("BEYONDCDN_PULLZONE_URL must start with 'http://' or 'https://'")

        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR, or CRITICAL")

        if self.log_format not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")

    def create_client(self):
        """
        Create a storage client for the configured zone.

        Returns:
            BeyondCDNClient instance
        """
        from beyondcdn.storage import BeyondCDNClient

        setup_logger(self)
        return BeyondCDNClient(
            storage_zone_name=self.storage_zone_name,
            api_key=self.api_key,
            region=parse_region(self.region),
        )

    def create_adapter(self):
        """
        Create a filesystem adapter for the configured zone.

        Returns:
            BeyondCDNAdapter instance
        """
        from beyondcdn.storage import BeyondCDNAdapter

        return BeyondCDNAdapter(
            client=self.create_client(),
            pullzone_url=self.pullzone_url,
            prefix=self.path_prefix,
        )


def load_config() -> Config:
    _load_dotenv()

    config = Config(
        storage_zone_name=os.environ.get("BEYONDCDN_STORAGE_ZONE", "").strip(),
        api_key=os.environ.get("BEYONDCDN_API_KEY", "").strip(),
        region=os.environ.get("BEYONDCDN_REGION", "de"),
        pullzone_url=os.environ.get("BEYONDCDN_PULLZONE_URL", ""),
        path_prefix=os.environ.get("BEYONDCDN_PATH_PREFIX", ""),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "text"),
        log_file_path=os.environ.get("LOG_FILE_PATH") or None,
    )

    config.validate()
    return config
