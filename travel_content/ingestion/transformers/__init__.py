"""Transformers turning RawContent into typed NormalizedContent."""

from travel_content.ingestion.transformers.base import BaseContentTransformer
from travel_content.ingestion.transformers.document import DocumentContentTransformer
from travel_content.ingestion.transformers.web import WebContentTransformer

__all__ = [
    "BaseContentTransformer",
    "DocumentContentTransformer",
    "WebContentTransformer",
]
