"""Platform helpers."""

from .files import atomic_write_text, write_if_absent

__all__ = ["atomic_write_text", "write_if_absent"]
