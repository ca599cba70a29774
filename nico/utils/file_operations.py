"""
Bulk file-copy helpers used by the non-templated writers.
"""

import shutil
from pathlib import Path
from typing import Iterable, List, Optional


def copy_tree(src: Path, dest: Path) -> List[Path]:
    """
    Recursively copy a directory into dest, merging with existing content.

    Args:
        src: Source directory (silently skipped if missing)
        dest: Destination directory (created if needed)

    Returns:
        Destination paths of every copied file (empty if src does not exist)
    """
    src = Path(src)
    dest = Path(dest)
    if not src.is_dir():
        return []

    shutil.copytree(src, dest, dirs_exist_ok=True)
    return sorted(dest / path.relative_to(src) for path in src.rglob("*") if path.is_file())


def copy_files(src_root: Path, dest_root: Path, files: Optional[Iterable[str]] = None) -> List[Path]:
    """
    Copy a list of files from src_root to dest_root, preserving relative paths.

    Args:
        src_root: Directory the relative file paths are resolved against
        dest_root: Directory the files are copied into
        files: Paths relative to src_root. None copies the whole src_root tree.

    Returns:
        Destination paths of every copied file
    """
    if files is None:
        return copy_tree(src_root, dest_root)

    copied = []
    for relative in files:
        src = Path(src_root) / relative
        dest = Path(dest_root) / relative
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dest)
        copied.append(dest)
    return copied
