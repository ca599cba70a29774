"""
Permalink substitution.

Fills a destination pattern such as "{{year}}/{{month}}/{{title}}.html" from a
PostView. Placeholders name PostView attributes (title, filename, directory,
year, month, day) or front matter keys. The title is slugified.
"""

import re

from markdown.extensions.toc import slugify

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([\w.]+)\s*\}\}")


def destination(view, pattern: str) -> str:
    """
    Substitute placeholders in a destination pattern.

    Args:
        view: PostView
        pattern: Destination pattern

    Returns:
        Destination string with duplicate slashes collapsed and no leading slash

    Raises:
        KeyError: If a placeholder names neither an attribute nor a front matter key

    Examples:
        >>> destination(view, "{{directory}}/{{filename}}.html")  # top-level page
        'about.html'
        >>> destination(view, "{{year}}/{{title}}.html")
        '2026/hello-world.html'
    """

    def substitute(match: re.Match) -> str:
        name = match.group(1)
        if name == "title":
            return slugify(view.title, "-")
        value = view
        try:
            for part in name.split("."):
                value = getattr(value, part)
        except AttributeError:
            raise KeyError(f"Unknown permalink placeholder '{name}' in '{pattern}'") from None
        return "" if value is None else str(value)

    result = PLACEHOLDER_PATTERN.sub(substitute, pattern)
    result = re.sub(r"/{2,}", "/", result)
    return result.lstrip("/")
