"""
Output path resolution.

Maps a logical destination ("posts/Hello World", "about/", "/site/feed.xml.html")
to the file written under the output root.
"""

import os
from pathlib import Path

SEPARATORS = ("/", os.sep)


def normalize_destination(destination: str, output_root: Path) -> str:
    """
    Normalize a destination to a lower-cased path relative to the output root.

    Rules:
    - A destination already under output_root has that prefix stripped
    - Leading separators are stripped and the result is lower-cased
    - A trailing separator (or an empty path) gets "index.html" appended
    - Anything else without an ".html" suffix gets ".html" appended
    - Every space becomes a hyphen

    Args:
        destination: Logical destination string
        output_root: Configured output root

    Returns:
        Relative POSIX-style path string

    Examples:
        >>> normalize_destination("Posts/Hello World", Path("/site"))
        'posts/hello-world.html'
        >>> normalize_destination("/site/about/", Path("/site"))
        'about/index.html'
    """
    relative = str(destination).replace(os.sep, "/")
    root = str(output_root).replace(os.sep, "/").rstrip("/") + "/"
    if relative.startswith(root):
        relative = relative[len(root):]

    relative = relative.lstrip("/").lower()

    if relative == "" or relative.endswith("/"):
        relative += "index.html"
    elif not relative.endswith(".html"):
        relative += ".html"

    return relative.replace(" ", "-")


def resolve_output_path(destination: str, output_root: Path) -> Path:
    """
    Resolve a destination to the absolute file path under the output root.

    Args:
        destination: Logical destination string
        output_root: Configured output root

    Returns:
        output_root joined with the normalized destination
    """
    return Path(output_root) / normalize_destination(destination, output_root)


def iframe_filename(key: str) -> str:
    """
    File name for an iframe sub-document, written next to its primary file.

    The key follows the same rules as destinations (lower-cased, spaces to
    hyphens, ".html" appended) and must name a single file.

    Args:
        key: iframe key from the document's front matter

    Returns:
        File name such as "my-demo.html"

    Raises:
        ValueError: If the key is empty or contains a path separator

    Examples:
        >>> iframe_filename("My Demo")
        'my-demo.html'
    """
    key = str(key)
    if key.strip(" .") == "" or any(sep in key for sep in SEPARATORS + ("\\",)):
        raise ValueError(f"Invalid iframe key {key!r}: must be a plain file name")

    return normalize_destination(key, Path())
