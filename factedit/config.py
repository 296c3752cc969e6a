"""
Configuration management for the fact editor.

The configuration is stored as a TOML file in the store directory.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# tomllib is read-only; tomli_w writes
import tomli_w

from .tags import DEFAULT_NEW_TAG_LABEL


CONFIG_FILENAME = "factedit.toml"
CONFIG_VERSION = 1
DEFAULT_STORE_FILE = "facts.db"


@dataclass
class EditorConfig:
    """Complete editor configuration."""
    path: Path
    version: int = CONFIG_VERSION
    created: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    # Label of the "add new tag" entry at the top of the tag list
    new_tag_label: str = DEFAULT_NEW_TAG_LABEL

    # Arabic reshaping is applied for display; sessions become read only
    fix_arabic: bool = False

    # SQLite database file, relative to path
    store_file: str = DEFAULT_STORE_FILE

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def store_path(self) -> Path:
        """Path to the fact database."""
        return self.path / self.store_file

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def get_default_store_path() -> Path:
    """
    Store directory when none is given explicitly.

    FACTEDIT_STORE_PATH wins; otherwise ~/.factedit
    """
    env_path = os.environ.get("FACTEDIT_STORE_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.home() / ".factedit"


def load_config(store_path: Path) -> EditorConfig:
    """
    Load configuration from a store directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = store_path / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    store = data.get("store", {})
    version = store.get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    editor = data.get("editor", {})
    fix_arabic = editor.get("fix_arabic", False)
    if not isinstance(fix_arabic, bool):
        raise ValueError(f"editor.fix_arabic must be true or false, got {fix_arabic!r}")

    return EditorConfig(
        path=store_path,
        version=version,
        created=store.get("created", ""),
        new_tag_label=editor.get("new_tag_label", DEFAULT_NEW_TAG_LABEL),
        fix_arabic=fix_arabic,
        store_file=store.get("file", DEFAULT_STORE_FILE),
    )


def save_config(config: EditorConfig) -> None:
    """
    Save configuration to the store directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "store": {
            "version": config.version,
            "created": config.created,
            "file": config.store_file,
        },
        "editor": {
            "new_tag_label": config.new_tag_label,
            "fix_arabic": config.fix_arabic,
        },
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(store_path: Optional[Path] = None) -> EditorConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    store_path = store_path or get_default_store_path()
    if (store_path / CONFIG_FILENAME).exists():
        return load_config(store_path)
    config = EditorConfig(path=store_path)
    save_config(config)
    return config
