"""Load the IAM action catalog from HTTP, S3 or the local filesystem with an on-disk cache."""

from __future__ import annotations

import gzip
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from core.errors import CatalogSourceError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://www.awsiamactions.io/json"
DEFAULT_CACHE_PATH = Path("~/.cache/iamx/aws_iam_actions.json")
DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:146.0) Gecko/20100101 Firefox/146.0"


def _decode(payload: bytes, name: str, origin: str) -> str:
    try:
        if name.endswith(".gz"):
            payload = gzip.decompress(payload)
        return payload.decode("utf-8")
    except (UnicodeDecodeError, OSError, EOFError) as exc:
        raise CatalogSourceError(f"Catalog data from {origin} could not be decoded: {exc}") from exc


def _parse(text: str, origin: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogSourceError(f"Catalog data from {origin} is not valid JSON: {exc}") from exc


@dataclass(slots=True)
class CatalogSource:
    """Resolve raw catalog records from a URL, ``s3://bucket/key`` URI or local path.

    Remote payloads are written to ``cache_path`` and served from there on the
    next run until the cache is deleted or refreshed. Local files are read as-is.
    """

    location: str = DEFAULT_CATALOG_URL
    cache_path: Path = DEFAULT_CACHE_PATH
    use_cache: bool = True
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    http_client: Any | None = None
    s3_client: Any | None = None

    origin: Optional[str] = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.cache_path = Path(self.cache_path).expanduser()

    @property
    def is_remote(self) -> bool:
        return self.location.startswith(("http://", "https://", "s3://"))

    def load(self) -> Any:
        """Return the deserialized catalog payload."""
        if not self.is_remote:
            self.origin = "file"
            return _parse(self._read_local(Path(self.location).expanduser()), self.location)

        if self.use_cache and self.cache_path.exists():
            logger.debug("Using cached catalog at %s", self.cache_path)
            self.origin = "cache"
            return _parse(self._read_local(self.cache_path), str(self.cache_path))

        if self.location.startswith("s3://"):
            text = self._fetch_s3()
        else:
            text = self._fetch_http()
        data = _parse(text, self.location)
        self.origin = "remote"
        if self.use_cache:
            self._write_cache(text)
        return data

    def delete_cache(self) -> bool:
        """Remove the cached payload. Returns False when there was nothing to delete."""
        if not self.cache_path.exists():
            return False
        try:
            self.cache_path.unlink()
        except OSError as exc:
            raise CatalogSourceError(f"Could not delete catalog cache {self.cache_path}: {exc}") from exc
        return True

    def refresh(self) -> Any:
        """Drop the cache and fetch the catalog again."""
        self.delete_cache()
        return self.load()

    # Local files ---------------------------------------------------------
    @staticmethod
    def _read_local(path: Path) -> str:
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise CatalogSourceError(f"Could not read catalog file {path}: {exc}") from exc
        return _decode(payload, path.name, str(path))

    def _write_cache(self, text: str) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise CatalogSourceError(f"Could not write catalog cache {self.cache_path}: {exc}") from exc
        logger.debug("Cached catalog at %s", self.cache_path)

    # Remote sources ------------------------------------------------------
    def _fetch_http(self) -> str:
        client = self.http_client or requests
        logger.debug("Fetching catalog from %s", self.location)
        try:
            response = client.get(self.location, headers={"User-Agent": self.user_agent}, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise CatalogSourceError(f"Could not fetch catalog from {self.location}: {exc}") from exc
        return response.text

    def _fetch_s3(self) -> str:
        bucket, key = self._parse_s3_url(self.location)
        client = self.s3_client or boto3.client("s3")
        logger.debug("Fetching catalog from s3://%s/%s", bucket, key)
        try:
            body = client.get_object(Bucket=bucket, Key=key)["Body"].read()
        except (BotoCoreError, ClientError) as exc:
            raise CatalogSourceError(f"Could not fetch catalog from {self.location}: {exc}") from exc
        return _decode(body, key, self.location)

    @staticmethod
    def _parse_s3_url(url: str) -> tuple[str, str]:
        _, _, rest = url.partition("s3://")
        bucket, _, key = rest.partition("/")
        if not bucket or not key:
            raise CatalogSourceError("S3 catalog URL must look like s3://bucket/key")
        return bucket, key


__all__ = ["CatalogSource", "DEFAULT_CATALOG_URL", "DEFAULT_CACHE_PATH"]
