"""
Travel content normalization, deduplication and tagging.

Turns loosely-structured travel content (scraped pages, parsed documents)
into canonical, typed, deduplicated and taxonomically tagged records.
"""

__version__ = "0.1.0"
