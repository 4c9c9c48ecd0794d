"""
Initializes the Dynaconf settings object for the audioboo_client component.
This module is the single source of truth for all configuration.

Values can be overridden with AUDIOBOO_ prefixed environment variables,
e.g. AUDIOBOO_API__BASE_URL.
"""

from pathlib import Path
from dynaconf import Dynaconf

PROJECT_ROOT = Path(__file__).parent.parent

settings = Dynaconf(
    root_path=PROJECT_ROOT,
    settings_files=["config/settings.toml"],
    secrets=["config/.secrets.toml"],
    envvar_prefix="AUDIOBOO",
    merge_enabled=True,
)
