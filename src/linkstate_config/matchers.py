"""Area classification by name patterns.

Patterns are compiled once when an area is registered and queried on the
neighbor/interface discovery path afterwards. A pattern always has to
consume the whole candidate (anchored match), so ``eth0`` never matches
``eth01``. Area patterns ignore letter case; link-monitor interface
patterns are compiled with ``case_sensitive=True``.

Patterns use the Python ``re`` dialect. Unlike a linear-time engine it
accepts backreferences and lookarounds, and a pathological pattern such
as ``(a+)+b`` can backtrack for a long time on a non-matching name. Keep
patterns to plain alternation, classes and repetition.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional

from .errors import (
    DuplicateAreaError,
    EmptyAreaRuleError,
    InvalidArgumentError,
    PatternCompileError,
)

logger = logging.getLogger(__name__)


class MatchKind(str, Enum):
    """What a candidate name identifies."""
    NEIGHBOR = "neighbor"
    INTERFACE = "interface"


@dataclass(frozen=True)
class PatternMatcherSet:
    """An immutable set of anchored patterns.

    Patterns are compiled when the set is built, so a set either holds no
    patterns and never matches, or holds every pattern compiled. Matching
    is case-insensitive unless ``case_sensitive`` is set.
    """
    patterns: tuple[str, ...] = ()
    case_sensitive: bool = False
    owner: str = field(default="", repr=False, compare=False)
    _compiled: tuple[re.Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        patterns = tuple(self.patterns)
        flags = 0 if self.case_sensitive else re.IGNORECASE
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern, flags))
            except re.error as e:
                raise PatternCompileError(pattern, self.owner or "pattern set", str(e)) from e
        object.__setattr__(self, "patterns", patterns)
        object.__setattr__(self, "_compiled", tuple(compiled))

    @classmethod
    def compile(
        cls,
        patterns: Iterable[str],
        owner: str = "",
        case_sensitive: bool = False,
    ) -> "PatternMatcherSet":
        """
        Compile patterns into a matcher set.

        Args:
            patterns: Pattern strings, in order
            owner: Used in error messages (e.g. "neighbor regexes of area 0")
            case_sensitive: Match letter case exactly

        Raises:
            PatternCompileError: On the first pattern that fails to compile
        """
        return cls(patterns=tuple(patterns), case_sensitive=case_sensitive, owner=owner)

    @property
    def is_empty(self) -> bool:
        return not self._compiled

    def match(self, candidate: str) -> bool:
        """True if candidate fully matches at least one pattern."""
        return any(p.fullmatch(candidate) for p in self._compiled)

    def __len__(self) -> int:
        return len(self.patterns)


EMPTY_MATCHER = PatternMatcherSet()


@dataclass(frozen=True)
class Area:
    """A routing area with its neighbor and interface matchers."""
    area_id: str
    neighbor_matcher: PatternMatcherSet = EMPTY_MATCHER
    interface_matcher: PatternMatcherSet = EMPTY_MATCHER

    def matcher(self, kind: MatchKind) -> PatternMatcherSet:
        if kind == MatchKind.NEIGHBOR:
            return self.neighbor_matcher
        return self.interface_matcher

    def should_peer_with_neighbor(self, neighbor_name: str) -> bool:
        return self.neighbor_matcher.match(neighbor_name)

    def should_discover_on_iface(self, if_name: str) -> bool:
        return self.interface_matcher.match(if_name)


class AreaRegistry:
    """Maps area identifiers to compiled Areas.

    Populated during validation, then frozen. A frozen registry rejects
    further registration and is safe to query from any thread.
    """

    def __init__(self):
        self._areas: dict[str, Area] = {}
        self._frozen = False

    def add_area(
        self,
        area_id: str,
        neighbor_patterns: Iterable[str] = (),
        interface_patterns: Iterable[str] = (),
    ) -> Area:
        """
        Register an area and compile its patterns.

        Args:
            area_id: Unique, non-empty area identifier
            neighbor_patterns: Patterns for neighbor node names
            interface_patterns: Patterns for local interface names

        Returns:
            The registered Area

        Raises:
            DuplicateAreaError: If area_id is already registered
            EmptyAreaRuleError: If both pattern lists are empty
            PatternCompileError: If a pattern is malformed
        """
        if self._frozen:
            raise RuntimeError("AreaRegistry is frozen")
        if not area_id:
            raise InvalidArgumentError("area_id must be a non-empty string")
        if area_id in self._areas:
            raise DuplicateAreaError(area_id)

        neighbor_patterns = tuple(neighbor_patterns)
        interface_patterns = tuple(interface_patterns)
        if not neighbor_patterns and not interface_patterns:
            raise EmptyAreaRuleError(area_id)

        area = Area(
            area_id=area_id,
            neighbor_matcher=self._compile(
                neighbor_patterns, f"neighbor regexes of area {area_id}"
            ),
            interface_matcher=self._compile(
                interface_patterns, f"interface regexes of area {area_id}"
            ),
        )
        self._areas[area_id] = area
        logger.debug(
            f"Registered area {area_id}: {len(neighbor_patterns)} neighbor, "
            f"{len(interface_patterns)} interface patterns"
        )
        return area

    def freeze(self) -> None:
        self._frozen = True

    @staticmethod
    def _compile(patterns: tuple[str, ...], owner: str) -> PatternMatcherSet:
        if not patterns:
            return EMPTY_MATCHER
        return PatternMatcherSet.compile(patterns, owner)

    def matches(self, area_id: str, candidate: str, kind: MatchKind) -> bool:
        """
        Check whether a neighbor or interface name belongs to an area.

        Raises:
            KeyError: If area_id is not registered
        """
        return self.get(area_id).matcher(MatchKind(kind)).match(candidate)

    def classify(self, candidate: str, kind: MatchKind) -> list[str]:
        """Return ids of all areas whose matcher accepts candidate."""
        kind = MatchKind(kind)
        return [
            area_id
            for area_id, area in self._areas.items()
            if area.matcher(kind).match(candidate)
        ]

    def get(self, area_id: str) -> Area:
        if area_id not in self._areas:
            raise KeyError(f"Unknown area: {area_id}")
        return self._areas[area_id]

    def find(self, area_id: str) -> Optional[Area]:
        return self._areas.get(area_id)

    @property
    def area_ids(self) -> list[str]:
        """Area ids in registration order."""
        return list(self._areas)

    def __contains__(self, area_id: object) -> bool:
        return area_id in self._areas

    def __iter__(self) -> Iterator[Area]:
        return iter(list(self._areas.values()))

    def __len__(self) -> int:
        return len(self._areas)
