# services/filter_spec.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Exact:
    value: Any


@dataclass(frozen=True)
class Range:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match."""
    pattern: str


@dataclass(frozen=True)
class OneOf:
    values: Tuple[Any, ...]


Condition = Union[Exact, Range, Contains, OneOf]

# One OR-group: the entry matches if any (field, pattern) pair matches.
OrGroup = Tuple[Tuple[str, Contains], ...]


@dataclass
class FilterSpec:
    """
    Field-keyed match conditions for one search request.

    ``fields`` are AND-ed together, ``any_of`` holds OR-groups that are each
    AND-ed with everything else. The same instance is used for both the page
    lookup and the total count.
    """
    fields: Dict[str, Condition] = field(default_factory=dict)
    any_of: List[OrGroup] = field(default_factory=list)

    def is_set(self, name: str) -> bool:
        return name in self.fields

    def set(self, name: str, condition: Condition) -> None:
        self.fields[name] = condition

    def set_default(self, name: str, condition: Condition) -> None:
        if name not in self.fields:
            self.fields[name] = condition

    def add_group(self, group: OrGroup) -> None:
        if group:
            self.any_of.append(tuple(group))

    def as_dict(self) -> Dict[str, Any]:
        """Plain representation, used for logging and the ``appliedFilters`` echo."""
        out: Dict[str, Any] = {}
        for name, condition in self.fields.items():
            if isinstance(condition, Exact):
                out[name] = condition.value
            elif isinstance(condition, Range):
                bounds = {}
                if condition.min is not None:
                    bounds["min"] = condition.min
                if condition.max is not None:
                    bounds["max"] = condition.max
                out[name] = bounds
            elif isinstance(condition, Contains):
                out[name] = {"contains": condition.pattern}
            elif isinstance(condition, OneOf):
                out[name] = {"in": list(condition.values)}
        if self.any_of:
            out["any_of"] = [
                [{fname: cond.pattern} for fname, cond in group] for group in self.any_of
            ]
        return out
