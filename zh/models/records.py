"""Lightweight entity projections stored in the cache."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter


class PipelineRecord(BaseModel):
    """Cached pipeline."""

    id: str
    name: str


class ZenhubEpicRecord(BaseModel):
    """Workspace-native epic."""

    kind: Literal["zenhub"] = "zenhub"
    id: str
    title: str


class LegacyEpicRecord(BaseModel):
    """Epic backed by a tracked issue."""

    kind: Literal["legacy"] = "legacy"
    id: str
    title: str
    issue_number: int
    repo_name: str
    repo_owner: str


EpicRecord = Annotated[ZenhubEpicRecord | LegacyEpicRecord, Field(discriminator="kind")]


class SprintRecord(BaseModel):
    """Cached sprint."""

    id: str
    name: str = ""
    generated_name: str = ""
    state: str = ""  # OPEN or CLOSED
    start_at: datetime | None = None
    end_at: datetime | None = None

    @property
    def display_name(self) -> str:
        """Custom name if set, otherwise the generated name."""
        return self.name or self.generated_name


class SprintAccessors(BaseModel):
    """Ids behind the workspace's current/next/previous sprint fields."""

    active_id: str | None = None
    upcoming_id: str | None = None
    previous_id: str | None = None


class RepoRecord(BaseModel):
    """Cached repository."""

    id: str
    gh_id: int
    name: str
    owner_name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner_name}/{self.name}"


class LabelRecord(BaseModel):
    """Cached label."""

    id: str
    name: str
    color: str = ""


class PriorityRecord(BaseModel):
    """Cached priority."""

    id: str
    name: str
    color: str = ""
    description: str = ""


class UserRecord(BaseModel):
    """Cached workspace user."""

    id: str
    name: str = ""
    github_login: str | None = None


class WorkspaceRecord(BaseModel):
    """Cached workspace (not scoped to any workspace)."""

    id: str
    name: str = ""
    display_name: str = ""
    org_name: str = ""


PIPELINE_LIST = TypeAdapter(list[PipelineRecord])
EPIC_LIST = TypeAdapter(list[EpicRecord])
SPRINT_LIST = TypeAdapter(list[SprintRecord])
REPO_LIST = TypeAdapter(list[RepoRecord])
LABEL_LIST = TypeAdapter(list[LabelRecord])
PRIORITY_LIST = TypeAdapter(list[PriorityRecord])
USER_LIST = TypeAdapter(list[UserRecord])
WORKSPACE_LIST = TypeAdapter(list[WorkspaceRecord])
