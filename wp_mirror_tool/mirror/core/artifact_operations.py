"""
Local artifact storage.

Artifacts are addressed purely by canonical name and checked by existence:

    <root>/<category>/<name>-<version>.zip

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from ..constants import CORE_IDENTIFIER
from ..models import Category


def _check_component(value: str, what: str) -> str:
    if not value or value in (".", "..") or "/" in value or "\\" in value:
        raise ValueError(f"Invalid {what} for artifact path: {value!r}")
    return value


def artifact_name(category: Category, identifier: str) -> str:
    """
    Derive the file name stem for an identifier.

    Plugins are identified by their plugin file ('akismet/akismet.php'),
    which maps to the plugin directory ('akismet'). A single-file plugin
    ('hello.php') maps to its stem.

    Args:
        category: Artifact category
        identifier: Core identifier, plugin file or theme slug

    Returns:
        Name used in the artifact file name
    """
    if category is Category.CORE:
        return CORE_IDENTIFIER
    if category is Category.PLUGIN:
        if "/" in identifier:
            name = identifier.split("/", 1)[0]
        else:
            name = identifier.removesuffix(".php")
        return _check_component(name, "plugin")
    return _check_component(identifier, "theme")


def artifact_path(root: Path, category: Category, identifier: str, version: str) -> Path:
    """
    Build the canonical path of an artifact.

    Args:
        root: Artifact root directory
        category: Artifact category
        identifier: Core identifier, plugin file or theme slug
        version: Version string

    Returns:
        Path of the artifact zip
    """
    name = artifact_name(category, identifier)
    _check_component(version, "version")
    return Path(root) / category.value / f"{name}-{version}.zip"


def artifact_exists(root: Path, category: Category, identifier: str, version: str) -> bool:
    """Check whether an artifact is present locally."""
    return artifact_path(root, category, identifier, version).is_file()


def write_artifact(path: Path, chunks: Iterable[bytes]) -> int:
    """
    Write an artifact, replacing any existing file.

    Data goes to a '.part' file private to this call and is renamed into
    place, so neither a crash nor a concurrent download of the same artifact
    leaves a truncated or mixed file under the canonical name. The last
    writer to finish wins.

    Args:
        path: Destination path
        chunks: Artifact content

    Returns:
        Number of bytes written

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    written = 0
    with tempfile.NamedTemporaryFile(
        "wb", dir=str(path.parent), prefix=f".{path.name}.", suffix=".part", delete=False
    ) as stream:
        part_path = Path(stream.name)
        try:
            for chunk in chunks:
                if not chunk:
                    continue
                stream.write(chunk)
                written += len(chunk)
        except Exception:
            stream.close()
            part_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(part_path, path)
    except OSError:
        part_path.unlink(missing_ok=True)
        raise
    return written
