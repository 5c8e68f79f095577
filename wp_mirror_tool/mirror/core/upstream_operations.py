"""
Upstream manifest sources.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any, Protocol

import httpx

from ..constants import (
    CORE_IDENTIFIER,
    SK_SEPARATOR,
    WP_CORE_API_URL,
    WP_PLUGINS_API_URL,
    WP_THEMES_API_URL,
)
from ..exceptions import UpstreamUnavailableError
from ..logging_config import get_logger
from ..models import Category, VersionRecord

logger = get_logger(__name__)

# Manifest collection key per category
MANIFEST_KEYS = {
    Category.CORE: "offers",
    Category.PLUGIN: "plugins",
    Category.THEME: "themes",
}


class UpstreamSource(Protocol):
    """Anything that can report the versions currently available upstream."""

    def fetch_manifest(self, category: Category) -> list[VersionRecord]:
        """Return the upstream manifest, raising UpstreamUnavailableError on failure."""
        ...


def _first(entry: dict[str, Any], *names: str) -> Any:
    for name in names:
        value = entry.get(name)
        if value:
            return value
    return None


def parse_entry(category: Category, entry: dict[str, Any]) -> VersionRecord | None:
    """
    Turn one manifest entry into a version record.

    Args:
        category: Category the manifest belongs to
        entry: Raw manifest entry

    Returns:
        Record, or None if the entry lacks an identifier, version or URL
    """
    if category is Category.CORE:
        identifier = CORE_IDENTIFIER
        version = entry.get("version")
        packages = entry.get("packages") or {}
        source_url = _first(entry, "download", "package") or packages.get("full")
    elif category is Category.PLUGIN:
        identifier = _first(entry, "plugin", "slug")
        version = _first(entry, "new_version", "version")
        source_url = _first(entry, "package", "download_link")
    else:
        identifier = _first(entry, "theme", "slug")
        version = _first(entry, "new_version", "version")
        source_url = _first(entry, "package", "download_link")

    if not identifier or not version or not source_url:
        return None
    if SK_SEPARATOR in str(identifier):
        return None

    attributes = {key: value for key, value in entry.items() if key != "version"}
    return VersionRecord(
        category=category,
        identifier=str(identifier),
        version=str(version),
        source_url=str(source_url),
        attributes=attributes,
    )


def parse_manifest(category: Category, payload: Any) -> list[VersionRecord]:
    """
    Parse a manifest payload, dropping unusable and duplicate entries.

    Raises:
        UpstreamUnavailableError: If the payload does not have the expected shape
    """
    key = MANIFEST_KEYS[category]
    if not isinstance(payload, dict) or not isinstance(payload.get(key), list):
        raise UpstreamUnavailableError(f"{category.value} manifest has no '{key}' list")

    records: dict[tuple[Category, str, str], VersionRecord] = {}
    for entry in payload[key]:
        if not isinstance(entry, dict):
            continue
        record = parse_entry(category, entry)
        if record is None:
            logger.debug(f"Skipping incomplete {category.value} manifest entry")
            continue
        records.setdefault(record.key, record)
    return list(records.values())


class WordPressOrgSource:
    """Manifest source backed by the api.wordpress.org endpoints."""

    def __init__(
        self,
        http_client: httpx.Client,
        core_url: str = WP_CORE_API_URL,
        plugins_url: str = WP_PLUGINS_API_URL,
        themes_url: str = WP_THEMES_API_URL,
    ):
        self.http_client = http_client
        self.urls = {
            Category.CORE: core_url,
            Category.PLUGIN: plugins_url,
            Category.THEME: themes_url,
        }

    def fetch_manifest(self, category: Category) -> list[VersionRecord]:
        url = self.urls[category]
        try:
            response = self.http_client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(
                f"Failed to fetch {category.value} manifest from {url}: {e}"
            ) from e
        except ValueError as e:
            raise UpstreamUnavailableError(
                f"Invalid JSON in {category.value} manifest from {url}: {e}"
            ) from e
        return parse_manifest(category, payload)
