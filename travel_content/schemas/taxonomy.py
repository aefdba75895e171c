# travel_content/schemas/taxonomy.py
"""
Loads and provides access to the travel content taxonomy.

The taxonomy is a static, hand-authored tree (``assets/travel_taxonomy.json``)
with eight top-level content categories. Every node carries a name, a
``kind`` (category, type, subtype, subcategory, amenity_group, mode, ...) and
keyword/synonym lists used for rule-based matching.

Provides functions to:
- Load and cache the taxonomy
- Resolve node ids or dotted paths to nodes
- Collect keywords for a category
- Score free text against every node
"""

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from travel_content.configs.config import Config

TAXONOMY_PATH = Config.get_taxonomy_path()


@lru_cache(maxsize=4096)
def _keyword_pattern(keyword: str) -> "re.Pattern[str]":
    return re.compile(rf"(?<!\w){re.escape(keyword.lower())}(?!\w)")


def keyword_in_text(keyword: str, text: str) -> bool:
    """
    Whole-word, case-insensitive keyword lookup.

    ``text`` is expected to be lower-cased already.

    Example:
        >>> keyword_in_text("art", "art gallery tour")
        True
        >>> keyword_in_text("art", "start here")
        False
    """
    return _keyword_pattern(keyword).search(text) is not None


@dataclass
class TaxonomyNode:
    """One entry in the taxonomy tree."""

    id: str
    name: str
    kind: str
    path: Tuple[str, ...]
    keywords: List[str] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    children: List["TaxonomyNode"] = field(default_factory=list)
    stars: List[int] = field(default_factory=list)

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)

    @property
    def terms(self) -> List[str]:
        """Keywords followed by synonyms, lower-cased."""
        return [t.lower() for t in self.keywords + self.synonyms]


class CategoryMatch(NamedTuple):
    category: str
    confidence: float


class TravelTaxonomy:
    """
    Read-only view over the taxonomy tree.

    Lookups accept either a node id (first match in depth-first order, e.g.
    ``"water_sports"``) or a dotted path (``"relaxation.beach"``,
    ``"activity.relaxation.beach"``) to disambiguate repeated ids.
    """

    def __init__(self, data: dict):
        self.version = data.get("version", "")
        self.roots: List[TaxonomyNode] = [
            self._build_node(raw, ()) for raw in data.get("categories", [])
        ]
        self._by_path: Dict[str, TaxonomyNode] = {}
        self._by_id: Dict[str, TaxonomyNode] = {}
        for node in self.iter_nodes():
            self._by_path[node.dotted_path] = node
            self._by_id.setdefault(node.id, node)

    @classmethod
    def _build_node(cls, raw: dict, parent_path: Tuple[str, ...]) -> TaxonomyNode:
        path = parent_path + (raw["id"],)
        return TaxonomyNode(
            id=raw["id"],
            name=raw.get("name", raw["id"]),
            kind=raw.get("kind", "node"),
            path=path,
            keywords=list(raw.get("keywords", [])),
            synonyms=list(raw.get("synonyms", [])),
            stars=list(raw.get("stars", [])),
            children=[cls._build_node(child, path) for child in raw.get("children", [])],
        )

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def iter_nodes(
        self, root: Optional[TaxonomyNode] = None, kind: Optional[str] = None
    ) -> Iterator[TaxonomyNode]:
        """Depth-first walk, optionally below ``root`` and filtered by ``kind``."""
        stack = list(reversed(root.children if root else self.roots))
        while stack:
            node = stack.pop()
            if kind is None or node.kind == kind:
                yield node
            stack.extend(reversed(node.children))

    def get_node(self, category_id: str) -> Optional[TaxonomyNode]:
        """Resolve a node id or dotted path."""
        if category_id in self._by_path:
            return self._by_path[category_id]
        if "." in category_id:
            suffix = "." + category_id
            for dotted, node in self._by_path.items():
                if dotted.endswith(suffix):
                    return node
            return None
        return self._by_id.get(category_id)

    def get_category_path(self, category_id: str) -> List[str]:
        """Full path from the top-level category down to the node, or []."""
        node = self.get_node(category_id)
        return list(node.path) if node else []

    def get_parent_categories(self, category_id: str) -> List[str]:
        """Ancestors of the node, outermost first."""
        return self.get_category_path(category_id)[:-1]

    def get_category_keywords(self, category: str) -> List[str]:
        """Union of the node's own keywords/synonyms and its children's."""
        node = self.get_node(category)
        if node is None:
            return []

        keywords: List[str] = []
        for source in [node] + node.children:
            for term in source.terms:
                if term not in keywords:
                    keywords.append(term)
        return keywords

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def match_categories(self, text: str, threshold: float = 0.6) -> List[CategoryMatch]:
        """
        Score ``text`` against every node carrying keywords.

        Each matched keyword counts 1 and a match on the node's name counts 2;
        the score is ``matches / (keywords + 2)``.

        Returns:
            Matches at or above ``threshold``, best first.
        """
        lower_text = text.lower()
        matches: List[CategoryMatch] = []

        for node in self.iter_nodes():
            terms = node.terms
            if not terms:
                continue

            match_count = sum(1 for term in terms if keyword_in_text(term, lower_text))
            if keyword_in_text(node.name, lower_text):
                match_count += 2
            if match_count == 0:
                continue

            confidence = min(1.0, match_count / (len(terms) + 2))
            if confidence >= threshold:
                matches.append(CategoryMatch(node.dotted_path, confidence))

        return sorted(matches, key=lambda m: m.confidence, reverse=True)


@lru_cache
def load_taxonomy(path: Optional[Path] = None) -> dict:
    """Load and cache the raw taxonomy JSON."""
    taxonomy_path = path or TAXONOMY_PATH
    with open(taxonomy_path, encoding="utf-8") as f:
        return json.load(f)


@lru_cache
def get_taxonomy() -> TravelTaxonomy:
    """Get the cached TravelTaxonomy built from the bundled asset."""
    return TravelTaxonomy(load_taxonomy())
