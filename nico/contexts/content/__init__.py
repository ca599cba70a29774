"""
Content Context

Responsibilities:
- Loads markdown sources (front matter + body) into the Resource store
- Classifies documents into public posts, secret posts and pages
- Provides the PostView model templates see as `post`
- Substitutes permalink patterns into destinations

Owns: Resource store, post view model, permalink patterns
Never: Renders templates or writes output files
"""

from nico.contexts.content.loader import load_resource, parse_document
from nico.contexts.content.models import ContentItem, Resource
from nico.contexts.content.permalink import destination
from nico.contexts.content.view import PostView, create_post_view

__all__ = [
    "load_resource",
    "parse_document",
    "ContentItem",
    "Resource",
    "destination",
    "PostView",
    "create_post_view",
]
