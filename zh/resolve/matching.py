"""Identifier matching shared by every entity resolver.

Rules, applied in order until one yields a result:

1. exact id (case-sensitive)
2. alias, whose target must match a name exactly
3. exact name, case-insensitive
4. unique case-insensitive substring of a name

A miss against a cached list triggers one refresh from the network before
NotFound is raised. Two or more matches are always reported as ambiguous.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from zh.cache import CacheKey, CacheStore
from zh.exceptions import CacheError, NotFoundError, UsageError
from zh.resolve.ambiguity import Candidate, ambiguous_error

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)
T = TypeVar("T")


@dataclass(frozen=True)
class MatchSpec(Generic[R]):
    """How one entity kind is matched and reported."""

    kind: str
    names: Callable[[R], Sequence[str]]
    describe: Callable[[R], Candidate]
    plural: str | None = None
    match_ids: bool = True
    match_substrings: bool = True
    # Kind-specific reference syntax, tried right after the id rule
    reference: Callable[[Sequence[R], str], R | None] | None = None
    normalize: Callable[[str], str] | None = None
    hint: str = ""
    advice: str | None = None


@dataclass(frozen=True)
class MatchOutcome(Generic[R]):
    """Result of matching one identifier against one list."""

    match: R | None = None
    candidates: tuple[R, ...] = field(default_factory=tuple)

    @property
    def ambiguous(self) -> bool:
        return len(self.candidates) > 1


def _exact_name(records: Sequence[R], name: str, rules: MatchSpec[R]) -> MatchOutcome[R]:
    wanted = name.lower()
    hits = tuple(r for r in records if any(n.lower() == wanted for n in rules.names(r) if n))
    if len(hits) == 1:
        return MatchOutcome(match=hits[0])
    return MatchOutcome(candidates=hits)


def match_records(
    records: Sequence[R],
    identifier: str,
    rules: MatchSpec[R],
    alias_target: str | None = None,
) -> MatchOutcome[R]:
    """Apply the matching rules to a single list of records."""
    if rules.match_ids:
        for record in records:
            if getattr(record, "id", None) == identifier:
                return MatchOutcome(match=record)

    if rules.reference:
        referenced = rules.reference(records, identifier)
        if referenced is not None:
            return MatchOutcome(match=referenced)

    if alias_target is not None:
        return _exact_name(records, alias_target, rules)

    exact = _exact_name(records, identifier, rules)
    if exact.match is not None or exact.ambiguous:
        return exact

    if not rules.match_substrings:
        return MatchOutcome()

    needle = identifier.lower()
    hits = tuple(r for r in records if any(needle in n.lower() for n in rules.names(r) if n))
    if len(hits) == 1:
        return MatchOutcome(match=hits[0])
    return MatchOutcome(candidates=hits)


def load_records(cache: CacheStore, key: CacheKey, adapter: TypeAdapter[list[T]]) -> list[T] | None:
    """Read a cached record list; None when absent, expired or unreadable."""
    value, found = cache.get(key)
    if not found:
        return None
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        logger.debug(f"Discarding unreadable cache entry {key}: {e}")
        return None


def write_records(cache: CacheStore, key: CacheKey, adapter: TypeAdapter[list[T]], records: Sequence[T]) -> None:
    """Replace a cached record list.

    Raises:
        CacheError: If the entry could not be written
    """
    cache.set(key, adapter.dump_python(list(records), mode="json"))


def store_records(cache: CacheStore, key: CacheKey, adapter: TypeAdapter[list[T]], records: Sequence[T]) -> None:
    """Replace a cached record list, logging instead of raising on failure."""
    try:
        write_records(cache, key, adapter, records)
    except CacheError as e:
        logger.warning(f"Could not update cache {key}: {e}")


def _raise_if_ambiguous(outcome: MatchOutcome[R], identifier: str, rules: MatchSpec[R]) -> None:
    if outcome.ambiguous:
        raise ambiguous_error(
            rules.kind,
            identifier,
            [rules.describe(r) for r in outcome.candidates],
            rules.plural,
            rules.advice,
        )


def not_found(rules: MatchSpec[Any], identifier: str, alias_target: str | None = None) -> NotFoundError:
    """Build the NotFound error for an identifier, mentioning stale aliases."""
    if alias_target is not None:
        message = (
            f"{rules.kind} alias {identifier!r} points to {alias_target!r}, "
            f"which does not match any {rules.kind} by name"
        )
    else:
        message = f"{rules.kind} {identifier!r} not found"
    if rules.hint:
        message += f": {rules.hint}"
    return NotFoundError(rules.kind, identifier, message)


def _prepare(identifier: str, rules: MatchSpec[Any]) -> str:
    if rules.normalize:
        identifier = rules.normalize(identifier)
    if not identifier.strip():
        raise UsageError(f"empty {rules.kind} identifier")
    return identifier


def resolve_records(
    cache: CacheStore,
    key: CacheKey,
    adapter: TypeAdapter[list[R]],
    fetch: Callable[[], list[R]],
    identifier: str,
    rules: MatchSpec[R],
    aliases: Mapping[str, str] | None = None,
) -> R:
    """Resolve one identifier against the cached list, refreshing once on a miss.

    Args:
        cache: Cache store holding the record list
        key: Cache key of the record list
        adapter: Validates and serialises the record list
        fetch: Fetches a fresh, complete record list from the network
        identifier: User-supplied identifier
        rules: Matching rules for the entity kind
        aliases: Alias table (alias -> display name) for the entity kind

    Returns:
        The single matching record

    Raises:
        NotFoundError: If nothing matches after a fresh fetch
        AmbiguousMatchError: If two or more records match
        APIError: If fetching fails
    """
    identifier = _prepare(identifier, rules)
    alias_target = aliases.get(identifier) if aliases else None

    cached = load_records(cache, key, adapter)
    if cached is not None:
        outcome = match_records(cached, identifier, rules, alias_target)
        if outcome.match is not None:
            logger.debug(f"Resolved {rules.kind} {identifier!r} from cache")
            return outcome.match
        _raise_if_ambiguous(outcome, identifier, rules)
        logger.debug(f"{rules.kind} {identifier!r} not in cached list, refreshing")

    records = fetch()
    store_records(cache, key, adapter, records)

    outcome = match_records(records, identifier, rules, alias_target)
    if outcome.match is not None:
        return outcome.match
    _raise_if_ambiguous(outcome, identifier, rules)
    raise not_found(rules, identifier, alias_target)


def resolve_many_records(
    cache: CacheStore,
    key: CacheKey,
    adapter: TypeAdapter[list[R]],
    fetch: Callable[[], list[R]],
    identifiers: Sequence[str],
    rules: MatchSpec[R],
) -> list[R]:
    """Resolve several identifiers with at most one refresh.

    Raises:
        NotFoundError: Naming every identifier still unresolved after a refresh
        AmbiguousMatchError: On the first ambiguous identifier
    """
    wanted = [_prepare(identifier, rules) for identifier in identifiers]
    resolved: dict[str, R] = {}

    records = load_records(cache, key, adapter)
    fetched = records is None
    if records is None:
        records = fetch()
        store_records(cache, key, adapter, records)

    def attempt(pending: Sequence[str], candidates: Sequence[R]) -> list[str]:
        missing = []
        for identifier in pending:
            outcome = match_records(candidates, identifier, rules)
            if outcome.match is not None:
                resolved[identifier] = outcome.match
                continue
            _raise_if_ambiguous(outcome, identifier, rules)
            missing.append(identifier)
        return missing

    missing = attempt(wanted, records)
    if missing and not fetched:
        records = fetch()
        store_records(cache, key, adapter, records)
        missing = attempt(missing, records)

    if missing:
        plural = rules.plural or f"{rules.kind}s"
        message = f"{plural} not found: {', '.join(missing)}"
        if rules.hint:
            message += f": {rules.hint}"
        raise NotFoundError(rules.kind, ", ".join(missing), message)

    return [resolved[identifier] for identifier in wanted]
