"""
Reading and writing the YAML documents dartcoach keeps on disk.

Two kinds of file exist: the game config (read only, may be absent) and
the profiles database (rewritten after every match). Both are mappings at
the top level. Rewrites replace the file in one step and can keep the
previous version as ``<name>.bak``.
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def read_yaml(path: Path, missing_ok: bool = False) -> Dict[str, Any]:
    """
    Read a YAML mapping.

    Args:
        path: File to read
        missing_ok: Return an empty mapping instead of raising when absent

    Returns:
        Parsed mapping (empty for an empty document)

    Raises:
        FileNotFoundError: If the file is absent and missing_ok is False
        ValueError: If the document is not a mapping
        yaml.YAMLError: If the document cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        if missing_ok:
            return {}
        raise FileNotFoundError(f"No such YAML file: {path}")

    with path.open("r", encoding="utf-8") as stream:
        try:
            document = yaml.safe_load(stream)
        except yaml.YAMLError as e:
            logger.error(f"Cannot parse {path}: {e}")
            raise

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(document).__name__}")
    return document


def backup_path(path: Path) -> Path:
    """Where the previous version of a file is kept."""
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def write_yaml(path: Path, data: Dict[str, Any], keep_backup: bool = False) -> None:
    """
    Replace a YAML file in one step.

    The document is dumped to a sibling temp file which is then renamed
    over the target, so readers see either the old or the new file.

    Args:
        path: Target file (parent directories are created)
        data: Mapping to write, keys kept in insertion order
        keep_backup: Copy the current file to <name>.bak first

    Raises:
        OSError: If the file cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if keep_backup and path.exists():
        try:
            shutil.copy2(path, backup_path(path))
        except OSError as e:
            logger.warning(f"Could not back up {path}: {e}")

    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.stem}_",
        suffix=".tmp",
        delete=False,
    )
    try:
        with handle:
            yaml.safe_dump(data, handle, allow_unicode=True, sort_keys=False)
        os.replace(handle.name, path)
    except (OSError, yaml.YAMLError) as e:
        Path(handle.name).unlink(missing_ok=True)
        logger.error(f"Writing {path} failed: {e}")
        raise OSError(f"Could not write {path}") from e

    logger.debug(f"Wrote {path}")
