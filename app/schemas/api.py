"""Request and response schemas for the HTTP endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.documents.editor import EditableSection, RenderedSection
from app.schemas.project import EditingOptions, Proposal, SavedProject


class ProposalsResponse(BaseModel):
    """Proposals extracted from the model reply, or why there are none."""

    proposals: list[Proposal]
    diagnostic: str | None = None


class PlanRequest(BaseModel):
    proposal_name: str


class PlanResponse(BaseModel):
    """The plan currently on screen, split and rendered per section."""

    proposal_name: str
    plan_markdown: str
    preamble: str = ""
    preamble_html: str = ""
    sections: list[RenderedSection]
    options: EditingOptions


class RenderRequest(BaseModel):
    markdown: str


class RenderResponse(BaseModel):
    html: str


class EditorResponse(BaseModel):
    """Editable bodies; the preamble is shown but not editable."""

    proposal_name: str
    preamble: str = ""
    sections: list[EditableSection]
    options: EditingOptions


class SectionsUpdateRequest(BaseModel):
    """Edited bodies, one per section, in display order."""

    bodies: list[str]


class RefineStartRequest(BaseModel):
    project_id: int | None = None


class RefineStartResponse(BaseModel):
    greeting: str


class RefineMessageRequest(BaseModel):
    message: str = Field(min_length=1)


class RefineMessageResponse(BaseModel):
    kind: str
    reply_html: str
    plan_markdown: str
    changed_sections: list[str] = Field(default_factory=list)
    sections: list[RenderedSection] = Field(default_factory=list)


class ProjectListResponse(BaseModel):
    count: int
    projects: list[SavedProject]


class DeleteProjectResponse(BaseModel):
    deleted: bool
    count: int


class NarrationStatus(BaseModel):
    state: Literal["idle", "playing", "paused"]
    index: int
    total: int
    progress: float
    current_sentence: str
    voice: str | None = None
    lang: str
    last_error: str | None = None


class PodcastResponse(BaseModel):
    script: str
    sentences: list[str]
    status: NarrationStatus


class ExportRequest(BaseModel):
    """Both names are required and trimmed before export."""

    model_config = ConfigDict(str_strip_whitespace=True)

    teacher_name: str = Field(min_length=1)
    school_name: str = Field(min_length=1)
    project_id: int | None = None


class ViewRequest(BaseModel):
    view: Literal["form", "history", "help"]


class AppStatusResponse(BaseModel):
    view: str
    proposal_name: str | None = None
    options: EditingOptions
    has_plan: bool
    chat_active: bool
    podcast: NarrationStatus | None = None
