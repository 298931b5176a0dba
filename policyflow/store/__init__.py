"""Version store and read projections"""

from .projections import build_groups, normalize_attachments, sort_versions
from .version_store import StoreMutation, VersionStore

__all__ = [
    "VersionStore",
    "StoreMutation",
    "build_groups",
    "normalize_attachments",
    "sort_versions",
]
