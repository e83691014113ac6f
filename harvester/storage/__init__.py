"""
Result sink: file naming, directory creation and serialization.
"""

from harvester.storage.file_manager import (
    ensure_dir,
    build_file_path,
    write_json_file,
    persist_result,
    write_csv,
)

__all__ = [
    "ensure_dir",
    "build_file_path",
    "write_json_file",
    "persist_result",
    "write_csv",
]
