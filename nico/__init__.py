"""
nico - static site writer

Turns a site's content model (posts, pages, static assets) into rendered
output files on disk using Jinja2 templates.

Architecture:
- Content Context: Loading markdown sources into the resource store, post views, permalinks
- Writing Context: Output paths, template engine, render context, writers and build driver
"""

__version__ = "0.1.0"
