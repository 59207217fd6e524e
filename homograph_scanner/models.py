"""
Shared data model
=================

Value types passed between the graph builder, the variant generator,
the danger scorer and the reverse resolver.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


# Score applied to an edge that has no entry in the weight table
DEFAULT_DANGER = 0.5
DEFAULT_STABLE_DANGER = 0.5


# ============================================================================
# CONFUSABLE GRAPH
# ============================================================================

@dataclass(frozen=True)
class Weight:
    """Visual similarity of a character pair."""
    danger: float
    stable_danger: float
    idna_pvalid: bool = False


DEFAULT_WEIGHT = Weight(DEFAULT_DANGER, DEFAULT_STABLE_DANGER, False)


@dataclass(frozen=True)
class Substitute:
    """One directed view of a confusable edge: what can replace a prototype."""
    char: str
    codepoint: str
    script: str
    danger: float
    stable_danger: float
    idna_pvalid: bool

    def score(self, use_max_danger: bool = False) -> float:
        return self.danger if use_max_danger else self.stable_danger


# ============================================================================
# VARIANTS
# ============================================================================

@dataclass(frozen=True)
class Substitution:
    """A single character edit applied to a label."""
    position: int
    original: str
    replacement: str
    codepoint: str
    script: str
    danger: float
    stable_danger: float
    idna_pvalid: bool

    @classmethod
    def from_substitute(cls, position: int, original: str, sub: Substitute) -> 'Substitution':
        return cls(
            position=position,
            original=original,
            replacement=sub.char,
            codepoint=sub.codepoint,
            script=sub.script,
            danger=sub.danger,
            stable_danger=sub.stable_danger,
            idna_pvalid=sub.idna_pvalid,
        )

    def score(self, use_max_danger: bool = False) -> float:
        return self.danger if use_max_danger else self.stable_danger


@dataclass(frozen=True)
class RawVariant:
    """A mutated label and the substitutions that produced it."""
    label: str
    substitutions: Tuple[Substitution, ...]

    @property
    def edit_count(self) -> int:
        return len(self.substitutions)


@dataclass
class MxRecord:
    priority: int
    exchange: str


@dataclass
class DnsResult:
    """DNS state of a candidate domain."""
    registered: bool = False
    a: List[str] = field(default_factory=list)
    aaaa: List[str] = field(default_factory=list)
    mx: List[MxRecord] = field(default_factory=list)
    ns: List[str] = field(default_factory=list)
    has_mx: bool = False
    threat_level: str = "unregistered"  # active, parked, unregistered

    @classmethod
    def from_records(cls, a: List[str], aaaa: List[str],
                     mx: List[MxRecord], ns: List[str]) -> 'DnsResult':
        """Derive registration and threat level from the raw record sets."""
        registered = bool(a or aaaa or ns)
        has_mx = bool(mx)
        if has_mx:
            threat_level = "active"
        elif registered:
            threat_level = "parked"
        else:
            threat_level = "unregistered"
        return cls(
            registered=registered,
            a=list(a),
            aaaa=list(aaaa),
            mx=list(mx),
            ns=list(ns),
            has_mx=has_mx,
            threat_level=threat_level,
        )


@dataclass
class DomainVariant:
    """A scored variant joined with a TLD."""
    domain: str
    danger_score: float
    edit_count: int
    substitutions: Tuple[Substitution, ...]
    ace: str
    best_font: Optional[str] = None
    best_font_score: Optional[float] = None
    dns: Optional[DnsResult] = None

    @property
    def scripts(self) -> List[str]:
        """Distinct scripts of the replacement characters, in edit order."""
        seen: List[str] = []
        for sub in self.substitutions:
            if sub.script not in seen:
                seen.append(sub.script)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data['substitutions'] = [asdict(s) for s in self.substitutions]
        data['scripts'] = self.scripts
        return data


@dataclass
class ScanResult:
    """Outcome of a forward scan."""
    original: str
    label: str
    tld: str
    total_generated: int
    variants: List[DomainVariant] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original': self.original,
            'label': self.label,
            'tld': self.tld,
            'total_generated': self.total_generated,
            'variants': [v.to_dict() for v in self.variants],
        }


# ============================================================================
# REVERSE SCAN
# ============================================================================

@dataclass(frozen=True)
class Impersonation:
    """A canonical domain a suspicious domain may be imitating."""
    domain: str
    similarity: float
    substitutions: Tuple[Substitution, ...]


@dataclass
class ReverseScanResult:
    domain: str
    ace: str
    impersonates: List[Impersonation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'domain': self.domain,
            'ace': self.ace,
            'impersonates': [
                {
                    'domain': target.domain,
                    'similarity': target.similarity,
                    'substitutions': [asdict(s) for s in target.substitutions],
                }
                for target in self.impersonates
            ],
        }
