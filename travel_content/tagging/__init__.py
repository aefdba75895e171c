"""Rule- and keyword-driven taxonomy tagging of normalized travel content."""

from travel_content.tagging.confidence import ConfidenceScorer
from travel_content.tagging.content_tagger import ContentTagger
from travel_content.tagging.entity_tagger import EntityTagger
from travel_content.tagging.keyword_extractor import KeywordExtractor

__all__ = ["ConfidenceScorer", "ContentTagger", "EntityTagger", "KeywordExtractor"]
