"""Publisher package: EPUB serialization and export."""

from publisher.epub_builder import EpubPackage, ManifestItem, NavPoint, plan_archive, serialize_archive
from publisher.export import export_filename, write_archive

__all__ = [
    "EpubPackage",
    "ManifestItem",
    "NavPoint",
    "plan_archive",
    "serialize_archive",
    "export_filename",
    "write_archive",
]
