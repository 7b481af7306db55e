"""Post record assembly and rich-text facets."""

from .assemble import (
    POST_COLLECTION,
    assemble_record,
    build_embed,
    build_external_embed,
    build_images_embed,
    format_timestamp,
)
from .facets import FacetDetector, HandleResolver, detect_links, detect_tags

__all__ = [
    "POST_COLLECTION",
    "FacetDetector",
    "HandleResolver",
    "assemble_record",
    "build_embed",
    "build_external_embed",
    "build_images_embed",
    "detect_links",
    "detect_tags",
    "format_timestamp",
]
