"""
Configuration module for the sparse Life simulator.

Contains all configurable parameters for a simulation run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import json
import re
from pathlib import Path

from .core import CoordinateCache, GenerationEngine, SequenceDriver


_RULESTRING = re.compile(r"^\s*B(?P<birth>\d*)\s*/?\s*S(?P<survival>\d*)\s*$", re.IGNORECASE)
# Legacy S/B notation, survival digits first: "23/3"
_SB_RULESTRING = re.compile(r"^\s*(?P<survival>\d*)\s*/\s*(?P<birth>\d*)\s*$")

# Well-known Life-like rules
RULE_PRESETS: Dict[str, str] = {
    "conway": "B3/S23",
    "highlife": "B36/S23",
    "day_and_night": "B3678/S34678",
    "seeds": "B2/S",
    "life_without_death": "B3/S012345678",
    "maze": "B3/S12345",
}


@dataclass
class RuleParams:
    """Birth/survival neighbor counts."""
    birth: Tuple[int, ...] = (3,)
    survival: Tuple[int, ...] = (2, 3)

    def __post_init__(self):
        self.birth = tuple(sorted(set(self.birth)))
        self.survival = tuple(sorted(set(self.survival)))

    @classmethod
    def from_rulestring(cls, rule: str) -> "RuleParams":
        """
        Parse B/S notation, e.g. "B3/S23" or "b36s23".

        A preset name from RULE_PRESETS is also accepted, as is the legacy
        S/B form "23/3". Bounded-grid suffixes such as ":T20,20" are
        rejected since the plane is unbounded.
        """
        rule = RULE_PRESETS.get(rule.strip().lower(), rule)
        if ":" in rule:
            raise ValueError(f"Invalid rulestring: {rule!r} (bounded grids are not supported)")
        match = _RULESTRING.match(rule) or _SB_RULESTRING.match(rule)
        if match is None:
            raise ValueError(f"Invalid rulestring: {rule!r} (expected B<digits>/S<digits>)")
        return cls(
            birth=tuple(int(c) for c in match.group("birth")),
            survival=tuple(int(c) for c in match.group("survival")),
        )

    @property
    def rulestring(self) -> str:
        b = "".join(str(c) for c in self.birth)
        s = "".join(str(c) for c in self.survival)
        return f"B{b}/S{s}"


@dataclass
class SequenceParams:
    """Sequence driver parameters."""
    window_size: int = 10                   # Worlds returned; history holds 2x
    max_generations: Optional[int] = None   # None = run until a stop condition
    flush_threshold: Optional[int] = None   # None = 2 * window_size + 1
    flush_interval: Optional[int] = None    # None = never flush during a run


@dataclass
class EngineParams:
    """Generation engine parameters."""
    workers: Optional[int] = None   # None = os.cpu_count()
    parallel_threshold: int = 2048  # Population before counting fans out
    cache_buckets: int = 64         # Lock stripes in the coordinate cache


@dataclass
class LifeConfig:
    """
    Main configuration container for the sparse Life simulator.

    Example:
        config = LifeConfig(
            rule=RuleParams.from_rulestring("B36/S23"),
            sequence=SequenceParams(window_size=20),
        )
        config.save("highlife.json")

        driver = config.build_driver()
    """
    rule: RuleParams = field(default_factory=RuleParams)
    sequence: SequenceParams = field(default_factory=SequenceParams)
    engine: EngineParams = field(default_factory=EngineParams)

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "LifeConfig":
        """Load configuration from JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    def _to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        def convert(obj):
            if hasattr(obj, '__dataclass_fields__'):
                return {k: convert(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert(x) for x in obj]
            return obj

        data = convert(self)
        data['rule']['rulestring'] = self.rule.rulestring
        return data

    @classmethod
    def _from_dict(cls, data: dict) -> "LifeConfig":
        """Reconstruct from dictionary."""
        data = dict(data)
        if 'rule' in data:
            rule = dict(data['rule'])
            rulestring = rule.pop('rulestring', None)
            if 'birth' in rule or 'survival' in rule:
                data['rule'] = RuleParams(**rule)
            elif rulestring is not None:
                data['rule'] = RuleParams.from_rulestring(rulestring)
            else:
                data['rule'] = RuleParams()
        if 'sequence' in data:
            data['sequence'] = SequenceParams(**data['sequence'])
        if 'engine' in data:
            data['engine'] = EngineParams(**data['engine'])
        return cls(**data)

    def validate(self) -> List[str]:
        """Validate configuration, return list of warnings/errors."""
        issues = []

        for name, counts in (("birth", self.rule.birth), ("survival", self.rule.survival)):
            if any(c < 0 for c in counts):
                issues.append(f"{name} counts must be non-negative")
            if any(c > 8 for c in counts):
                issues.append(f"{name} counts above 8 can never match a Moore neighborhood")
        if 0 in self.rule.birth:
            issues.append("B0 has no effect on an unbounded plane (only cells with live neighbors are considered)")

        seq = self.sequence
        if seq.window_size < 0:
            issues.append("window_size must be non-negative")
        if seq.max_generations is not None and seq.max_generations < 1:
            issues.append("max_generations must be at least 1")
        if seq.flush_interval is not None and seq.flush_interval < 1:
            issues.append("flush_interval must be at least 1")
        if seq.flush_threshold is not None:
            if seq.flush_threshold < 0:
                issues.append("flush_threshold must be non-negative")
            elif seq.flush_threshold < 2 * seq.window_size:
                issues.append("flush_threshold below 2 * window_size may evict coordinates of retained worlds")

        if self.engine.workers is not None and self.engine.workers < 1:
            issues.append("workers must be at least 1")
        if self.engine.parallel_threshold < 1:
            issues.append("parallel_threshold must be at least 1")
        if self.engine.cache_buckets < 1:
            issues.append("cache_buckets must be at least 1")

        return issues

    # ===== Factories =====

    def build_cache(self) -> CoordinateCache:
        return CoordinateCache(buckets=self.engine.cache_buckets)

    def build_engine(self, cache: Optional[CoordinateCache] = None) -> GenerationEngine:
        """Create a GenerationEngine (with a fresh cache if none is given)."""
        return GenerationEngine(
            cache=cache if cache is not None else self.build_cache(),
            workers=self.engine.workers,
            parallel_threshold=self.engine.parallel_threshold,
        )

    def build_driver(self, engine: Optional[GenerationEngine] = None) -> SequenceDriver:
        """Create a SequenceDriver wired to this configuration's rule."""
        return SequenceDriver(
            engine if engine is not None else self.build_engine(),
            birth=self.rule.birth,
            survival=self.rule.survival,
            max_generations=self.sequence.max_generations,
            flush_threshold=self.sequence.flush_threshold,
            flush_interval=self.sequence.flush_interval,
        )


# Preset configurations
def conway_config() -> LifeConfig:
    """Conway's Game of Life (B3/S23)."""
    return LifeConfig()


def highlife_config() -> LifeConfig:
    """HighLife (B36/S23), home of the replicator."""
    return LifeConfig(rule=RuleParams.from_rulestring(RULE_PRESETS["highlife"]))


def day_and_night_config() -> LifeConfig:
    """Day & Night (B3678/S34678), symmetric under live/dead inversion."""
    return LifeConfig(rule=RuleParams.from_rulestring(RULE_PRESETS["day_and_night"]))


def seeds_config() -> LifeConfig:
    """Seeds (B2/S): every live cell dies each generation."""
    return LifeConfig(
        rule=RuleParams.from_rulestring(RULE_PRESETS["seeds"]),
        sequence=SequenceParams(max_generations=1000),
    )
