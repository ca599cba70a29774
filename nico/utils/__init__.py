"""
Shared utilities for nico.

Common functionality used across contexts:
- Logger setup
- File copy operations
- String reference resolution
- Timestamps
"""

from nico.utils.file_operations import copy_files, copy_tree
from nico.utils.module_loading import ResolutionError, import_string
from nico.utils.timestamp import now

__all__ = ["copy_files", "copy_tree", "import_string", "ResolutionError", "now"]
