"""I/O helpers."""

from .settings import (  # noqa: F401
    Settings,
    default_settings,
    load_settings,
    save_settings,
    settings_from_defn,
    settings_to_defn,
)
