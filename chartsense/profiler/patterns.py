"""
Pattern Library for column name matching.

Loads taxonomies/chart_patterns.yaml and provides unified access to:
- Role vocabularies (identifier, free_text, metric, average, dimension)
- Dataset archetype vocabularies with display label, description and charts
- Column name normalization and title-casing helpers

This module uses a singleton pattern so the YAML is parsed once and shared
by the role scorer, the recommendation generator and the archetype
classifier.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from chartsense.core.exceptions import ConfigError
from chartsense.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_PATTERNS_PATH = Path(__file__).parent / "taxonomies" / "chart_patterns.yaml"

ROLE_NAMES = ("identifier", "free_text", "metric", "average", "dimension")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[_\-.]+")
_WORD_START = re.compile(r"\b\w")


def normalize_column(name: str) -> str:
    """
    Normalize a column name for keyword matching.

    'Unit Price ($)' -> 'unit_price', 'customerID' -> 'customerid'
    """
    return _NON_ALNUM.sub("_", str(name).lower()).strip("_")


def to_title_case(name: str) -> str:
    """
    Display form of a column name.

    'unit_price' -> 'Unit Price', 'orderDate' -> 'Order Date'
    """
    text = _CAMEL_BOUNDARY.sub(r"\1 \2", str(name))
    text = _SEPARATORS.sub(" ", text)
    text = _WORD_START.sub(lambda m: m.group(0).upper(), text)
    return text.strip()


@dataclass
class Archetype:
    """Display metadata and name vocabulary for one dataset archetype."""
    name: str
    label: str
    description: str
    charts: List[str] = field(default_factory=list)
    keywords: Tuple[str, ...] = ()


class PatternLibrary:
    """
    Loads and provides keyword vocabularies.

    Uses singleton pattern so the vocabularies are loaded once. A custom
    path can be passed on first construction; call reset() to reload.
    """

    _instance: Optional["PatternLibrary"] = None

    def __new__(cls, patterns_path: Optional[Path] = None):
        """Singleton pattern for the pattern library."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, patterns_path: Optional[Path] = None):
        if self._initialized:
            return

        path = Path(patterns_path) if patterns_path else DEFAULT_PATTERNS_PATH
        data = self._load(path)
        self.version = str(data.get("version", "1.0.0"))
        self._roles = self._parse_roles(data.get("roles") or {})
        self._archetypes = self._parse_archetypes(data.get("archetypes") or {})
        self.path = path
        self._initialized = True
        logger.debug(f"Loaded chart patterns v{self.version} from {path}")

    def _load(self, path: Path) -> Dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise ConfigError(f"Pattern file not found: {path}")
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse pattern file {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Pattern file {path} must contain a mapping")
        return data

    def _parse_roles(self, roles: Dict) -> Dict[str, Tuple[str, ...]]:
        parsed = {}
        for role in ROLE_NAMES:
            keywords = roles.get(role)
            if keywords is None:
                logger.warning(f"Pattern file has no '{role}' vocabulary; role rules will not fire")
                keywords = []
            parsed[role] = tuple(normalize_column(k) for k in keywords)
        return parsed

    def _parse_archetypes(self, archetypes: Dict) -> Dict[str, Archetype]:
        parsed = {}
        for name, entry in archetypes.items():
            entry = entry or {}
            parsed[name] = Archetype(
                name=name,
                label=entry.get("label", name.title()),
                description=entry.get("description", ""),
                charts=list(entry.get("charts", [])),
                keywords=tuple(normalize_column(k) for k in entry.get("keywords", [])),
            )
        if "generic" not in parsed:
            parsed["generic"] = Archetype(name="generic", label="General Analysis", description="")
        return parsed

    def keywords(self, role: str) -> Tuple[str, ...]:
        """Normalized vocabulary for a column role."""
        return self._roles.get(role, ())

    def archetype(self, name: str) -> Archetype:
        return self._archetypes.get(name, self._archetypes["generic"])

    @property
    def archetypes(self) -> Dict[str, Archetype]:
        return dict(self._archetypes)

    # ------------------------------------------------------------------
    # Name matching
    # ------------------------------------------------------------------

    def is_identifier_name(self, name: str) -> bool:
        """Exact, prefix ('id_...') or suffix ('..._id') identifier match."""
        norm = normalize_column(name)
        return any(
            norm == kw or norm.endswith(f"_{kw}") or norm.startswith(f"{kw}_")
            for kw in self.keywords("identifier")
        )

    def contains_keyword(self, role: str, name: str) -> bool:
        """Substring match of any role keyword inside the normalized name."""
        norm = normalize_column(name)
        return any(kw in norm for kw in self.keywords(role))

    def is_free_text_name(self, name: str) -> bool:
        return self.contains_keyword("free_text", name)

    def is_metric_name(self, name: str) -> bool:
        return self.contains_keyword("metric", name)

    def is_average_name(self, name: str) -> bool:
        return self.contains_keyword("average", name)

    def is_dimension_name(self, name: str) -> bool:
        return self.contains_keyword("dimension", name)

    @staticmethod
    def match_rate(column_names: Iterable[str], keywords: Iterable[str]) -> float:
        """
        Share of columns whose normalized name contains, or is contained in,
        a vocabulary entry.
        A name that normalizes to the empty string is contained in every entry.
        """
        names = list(column_names)
        keywords = tuple(keywords)
        matches = 0
        for name in names:
            norm = normalize_column(name)
            if any(kw in norm or norm in kw for kw in keywords):
                matches += 1
        return matches / max(len(names), 1)

    @classmethod
    def reset(cls):
        """
        Reset the singleton instance.

        Primarily used for testing to force a reload.
        """
        cls._instance = None


def get_pattern_library() -> PatternLibrary:
    """Get the singleton PatternLibrary instance."""
    return PatternLibrary()
