"""Human-readable reports for identifiers that match several entities."""

from collections.abc import Sequence
from dataclasses import dataclass

from zh.exceptions import AmbiguousMatchError


@dataclass(frozen=True)
class Candidate:
    """One entity an ambiguous identifier matched."""

    id: str
    name: str
    context: str = ""

    @property
    def label(self) -> str:
        """Display line, e.g. ``Sprint 47 [sp47]`` or ``Platform (Acme) [ws1]``."""
        text = self.name
        if self.context:
            text += f" ({self.context})"
        return f"{text} [{self.id}]"


def describe_ambiguity(
    kind: str,
    identifier: str,
    candidates: Sequence[Candidate],
    plural: str | None = None,
    advice: str | None = None,
) -> str:
    """Explain which entities an identifier matched and how to narrow it down."""
    plural = plural or f"{kind}s"
    lines = [f"{kind} {identifier!r} is ambiguous: matches {len(candidates)} {plural}:"]
    lines.extend(f"  - {candidate.label}" for candidate in candidates)
    lines.append("")
    lines.append(advice or f"Use a more specific name or the {kind} ID.")
    return "\n".join(lines)


def ambiguous_error(
    kind: str,
    identifier: str,
    candidates: Sequence[Candidate],
    plural: str | None = None,
    advice: str | None = None,
) -> AmbiguousMatchError:
    """Build the error raised for an ambiguous identifier."""
    message = describe_ambiguity(kind, identifier, candidates, plural, advice)
    return AmbiguousMatchError(kind, identifier, list(candidates), message)
