"""
Variable Lifetime Model

Represents the live interval of a program variable in clock ticks and the
table of lifetimes accepted into an allocation run.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Tuple

VarId = Hashable
Cycle = int


class LifetimeError(ValueError):
    """Base class for invalid lifetime input"""
    pass


class UseBeforeDefError(LifetimeError):
    """Raised when a variable is used before it is defined"""

    def __init__(self, var_id: VarId, t_def: Cycle, t_use: Cycle):
        self.var_id = var_id
        self.t_def = t_def
        self.t_use = t_use
        super().__init__(
            f"invalid lifetime: use before definition: {var_id} "
            f"(t_def={t_def}, t_use={t_use})"
        )


class LifetimeOutOfBoundsError(LifetimeError):
    """
    Raised when lifetimes end after the declared cycle horizon.

    Attributes:
        violations: List of (var_id, horizon, t_use) for every offending variable
    """

    def __init__(self, violations: List[Tuple[VarId, Cycle, Cycle]]):
        self.violations = violations
        details = "; ".join(
            f"lifetime of {var_id} out of bounds: max lifetime {horizon}, "
            f"variable use time {t_use}"
            for var_id, horizon, t_use in violations
        )
        super().__init__(details)


@dataclass(frozen=True)
class Lifetime:
    """Closed live interval [t_def, t_use] of one variable"""
    id: VarId
    t_def: Cycle
    t_use: Cycle

    def __post_init__(self):
        if self.t_def < 0 or self.t_use < 0:
            raise UseBeforeDefError(self.id, self.t_def, self.t_use)
        if self.t_def > self.t_use:
            raise UseBeforeDefError(self.id, self.t_def, self.t_use)

    def overlap(self, other: 'Lifetime') -> bool:
        """Intervals sharing at least one tick overlap, touching endpoints included"""
        return not (self.t_use < other.t_def or other.t_use < self.t_def)

    def __len__(self) -> int:
        return self.t_use - self.t_def + 1


class LifetimeTable:
    """
    Lifetimes accepted into a run, validated against a cycle horizon.

    Args:
        horizon: Last valid clock tick
        lifetimes: Lifetimes to accept

    Raises:
        LifetimeOutOfBoundsError: If any t_use exceeds the horizon
        LifetimeError: If a variable id appears twice
    """

    def __init__(self, horizon: Cycle, lifetimes: Iterable[Lifetime]):
        if horizon < 0:
            raise LifetimeError(f"Cycle horizon must be non-negative, got {horizon}")

        self.horizon = horizon
        self.lifetimes: Dict[VarId, Lifetime] = {}

        violations = []
        for lifetime in lifetimes:
            if lifetime.id in self.lifetimes:
                raise LifetimeError(f"Duplicate lifetime for variable {lifetime.id}")
            if lifetime.t_use > horizon:
                violations.append((lifetime.id, horizon, lifetime.t_use))
            self.lifetimes[lifetime.id] = lifetime

        if violations:
            raise LifetimeOutOfBoundsError(violations)

    @classmethod
    def from_mapping(cls, horizon: Cycle,
                     intervals: Dict[VarId, Tuple[Cycle, Cycle]]) -> 'LifetimeTable':
        """Build a table from a {var_id: (t_def, t_use)} mapping"""
        return cls(horizon, [
            Lifetime(var_id, t_def, t_use)
            for var_id, (t_def, t_use) in intervals.items()
        ])

    @property
    def cycles(self) -> int:
        """Number of clock ticks covered, 0..horizon inclusive"""
        return self.horizon + 1

    def __getitem__(self, var_id: VarId) -> Lifetime:
        return self.lifetimes[var_id]

    def __contains__(self, var_id: VarId) -> bool:
        return var_id in self.lifetimes

    def __iter__(self):
        return iter(self.lifetimes.values())

    def __len__(self) -> int:
        return len(self.lifetimes)
