"""
Query filters compiled from an ability.

Filters are small immutable trees. The constructor helpers below keep them
simplified so that, for example, OR-ing anything into ``MATCH_NONE`` yields
the other operand unchanged. ``to_prisma_where`` renders a filter as Prisma
where input; ``matches`` evaluates it against an in-memory record.
"""

from collections.abc import Mapping, Set
from dataclasses import dataclass
from typing import Any, Union

from .models import In


def field_value(record: Any, name: str) -> Any:
    """Read a field from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class MatchAll:
    def matches(self, record: Any) -> bool:
        return True


@dataclass(frozen=True)
class MatchNone:
    def matches(self, record: Any) -> bool:
        return False


@dataclass(frozen=True)
class FieldEquals:
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        return field_value(record, self.field) == self.value


@dataclass(frozen=True)
class FieldIn:
    field: str
    values: frozenset[Any]

    def matches(self, record: Any) -> bool:
        return field_value(record, self.field) in self.values


@dataclass(frozen=True)
class AnyOf:
    filters: tuple["Filter", ...]

    def matches(self, record: Any) -> bool:
        return any(f.matches(record) for f in self.filters)


@dataclass(frozen=True)
class AllOf:
    filters: tuple["Filter", ...]

    def matches(self, record: Any) -> bool:
        return all(f.matches(record) for f in self.filters)


@dataclass(frozen=True)
class Not:
    filter: "Filter"

    def matches(self, record: Any) -> bool:
        return not self.filter.matches(record)


Filter = Union[MatchAll, MatchNone, FieldEquals, FieldIn, AnyOf, AllOf, Not]

MATCH_ALL = MatchAll()
MATCH_NONE = MatchNone()


def any_of(left: Filter, right: Filter) -> Filter:
    if isinstance(left, MatchAll) or isinstance(right, MatchAll):
        return MATCH_ALL
    if isinstance(left, MatchNone):
        return right
    if isinstance(right, MatchNone) or left == right:
        return left
    parts = left.filters if isinstance(left, AnyOf) else (left,)
    parts += right.filters if isinstance(right, AnyOf) else (right,)
    return AnyOf(parts)


def all_of(left: Filter, right: Filter) -> Filter:
    if isinstance(left, MatchNone) or isinstance(right, MatchNone):
        return MATCH_NONE
    if isinstance(left, MatchAll):
        return right
    if isinstance(right, MatchAll) or left == right:
        return left
    parts = left.filters if isinstance(left, AllOf) else (left,)
    parts += right.filters if isinstance(right, AllOf) else (right,)
    return AllOf(parts)


def negate(inner: Filter) -> Filter:
    if isinstance(inner, MatchAll):
        return MATCH_NONE
    if isinstance(inner, MatchNone):
        return MATCH_ALL
    if isinstance(inner, Not):
        return inner.filter
    return Not(inner)


def from_conditions(conditions: Mapping[str, Any] | None) -> Filter:
    """Turn rule conditions into a filter; ``None`` matches everything."""
    if conditions is None:
        return MATCH_ALL

    result: Filter = MATCH_ALL
    for name, expected in conditions.items():
        if isinstance(expected, In):
            predicate: Filter = (
                FieldIn(name, expected.values) if expected.values else MATCH_NONE
            )
        else:
            predicate = FieldEquals(name, expected)
        result = all_of(result, predicate)
    return result


def to_prisma_where(filter: Filter, nullable: Set[str] = frozenset()) -> dict[str, Any]:
    """
    Render a filter as Prisma where input.

    ``nullable`` names the fields that may be NULL in the database. A negated
    comparison in SQL never matches a NULL column, while ``matches`` treats a
    missing value as simply unequal. Negations over these fields are pushed
    down to the comparisons and OR-ed with an explicit null check.
    """
    if isinstance(filter, MatchAll):
        return {}
    if isinstance(filter, MatchNone):
        # Prisma has no literal false; an empty id set never matches
        return {"id": {"in": []}}
    if isinstance(filter, FieldEquals):
        return {filter.field: filter.value}
    if isinstance(filter, FieldIn):
        return {filter.field: {"in": sorted(filter.values, key=str)}}
    if isinstance(filter, AnyOf):
        return {"OR": [to_prisma_where(f, nullable) for f in filter.filters]}
    if isinstance(filter, AllOf):
        return {"AND": [to_prisma_where(f, nullable) for f in filter.filters]}
    if isinstance(filter, Not):
        if not _fields(filter.filter) & nullable:
            return {"NOT": to_prisma_where(filter.filter)}
        return _negated_where(filter.filter, nullable)
    raise TypeError(f"Unsupported filter: {filter!r}")


def _fields(filter: Filter) -> set[str]:
    if isinstance(filter, (FieldEquals, FieldIn)):
        return {filter.field}
    if isinstance(filter, (AnyOf, AllOf)):
        return set().union(*(_fields(f) for f in filter.filters))
    if isinstance(filter, Not):
        return _fields(filter.filter)
    return set()


def _negated_where(inner: Filter, nullable: Set[str]) -> dict[str, Any]:
    if isinstance(inner, AnyOf):
        return {"AND": [_negated_where(f, nullable) for f in inner.filters]}
    if isinstance(inner, AllOf):
        return {"OR": [_negated_where(f, nullable) for f in inner.filters]}
    if isinstance(inner, Not):
        return to_prisma_where(inner.filter, nullable)
    if isinstance(inner, (MatchAll, MatchNone)):
        return to_prisma_where(negate(inner))

    where = {"NOT": to_prisma_where(inner)}
    if isinstance(inner, FieldEquals):
        excludes_null = inner.value is not None
    else:
        excludes_null = None not in inner.values
    if inner.field in nullable and excludes_null:
        return {"OR": [where, {inner.field: None}]}
    return where


def merge_where(
    query: Mapping[str, Any] | None, filter: Filter, nullable: Set[str] = frozenset()
) -> dict[str, Any]:
    """AND a caller supplied where clause with a compiled filter."""
    where = to_prisma_where(filter, nullable)
    if not query:
        return where
    if not where:
        return dict(query)
    return {"AND": [dict(query), where]}
