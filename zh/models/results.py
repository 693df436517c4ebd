"""Resolution results returned to commands."""

from pydantic import BaseModel, ConfigDict

from zh.core.constants import EpicKind


class ResolvedEntity(BaseModel):
    """Base for all resolution results; immutable once returned."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class PipelineResult(ResolvedEntity):
    """Resolved pipeline."""


class EpicResult(ResolvedEntity):
    """Resolved epic. ``name`` is the epic title."""

    kind: EpicKind


class SprintResult(ResolvedEntity):
    """Resolved sprint. ``name`` is the display name (custom or generated)."""


class RepoResult(ResolvedEntity):
    """Resolved repository."""

    gh_id: int
    owner_name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner_name}/{self.name}"


class LabelResult(ResolvedEntity):
    """Resolved label."""

    color: str = ""


class PriorityResult(ResolvedEntity):
    """Resolved priority."""

    color: str = ""


class UserResult(ResolvedEntity):
    """Resolved user."""

    login: str | None = None

    @property
    def display_name(self) -> str:
        """Best human-readable name for the user."""
        if self.login:
            return f"@{self.login}"
        return self.name or self.id


class WorkspaceResult(ResolvedEntity):
    """Resolved workspace. ``name`` is the display name."""

    org_name: str = ""


class IssueResult(BaseModel):
    """Resolved issue or pull request."""

    model_config = ConfigDict(frozen=True)

    id: str
    number: int
    repo_gh_id: int
    repo_owner: str
    repo_name: str

    @property
    def ref(self) -> str:
        """Short reference (``repo#number``)."""
        return f"{self.repo_name}#{self.number}"

    @property
    def full_ref(self) -> str:
        """Long reference (``owner/repo#number``)."""
        return f"{self.repo_owner}/{self.repo_name}#{self.number}"
