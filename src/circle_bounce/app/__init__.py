"""Desktop app package (PySide6)."""
