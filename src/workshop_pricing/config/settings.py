"""
Centralized settings and path configuration for workshop pricing.
"""
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_package_data_dir() -> Path:
    """Directory holding the default CSV data shipped with the package."""
    return Path(__file__).resolve().parent.parent / 'data'


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    project_root: Path
    data_dir: Path

    # Data files
    membership_rules_csv: Path
    workshops_csv: Path

    # Payments
    currency: str = 'CAD'
    etransfer_email: str = 'payments@example.org'

    log_level: str = 'INFO'

    @classmethod
    def load(cls, project_root: Optional[Path] = None, data_dir: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure and environment."""
        root = project_root or get_project_root()

        env_data_dir = os.environ.get('WORKSHOP_PRICING_DATA_DIR')
        data = data_dir or (Path(env_data_dir) if env_data_dir else get_package_data_dir())

        return cls(
            project_root=root,
            data_dir=data,
            membership_rules_csv=data / 'membership_pricing_rules.csv',
            workshops_csv=data / 'workshops.csv',
            etransfer_email=os.environ.get('WORKSHOP_PRICING_ETRANSFER_EMAIL', cls.etransfer_email),
            log_level=os.environ.get('WORKSHOP_PRICING_LOG_LEVEL', cls.log_level).upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """
    Drop the cached settings so the next get_settings() reloads them.

    API providers key their cached repositories on the data path, so a new
    data dir is picked up there too.
    """
    global _settings
    _settings = None
