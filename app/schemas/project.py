"""Schemas for plan documents, proposals and saved projects."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
    title: str
    body: str = ""


class PlanDocument(BaseModel):
    """An ordered, numbered plan split into sections.

    ``preamble`` holds any text the model wrote before the first numbered
    heading; it is not part of the section model.
    """

    model_config = ConfigDict(frozen=True)

    sections: list[Section] = Field(default_factory=list)
    preamble: str = ""

    @property
    def titles(self) -> list[str]:
        return [section.title for section in self.sections]


class Proposal(BaseModel):
    name: str
    summary: str
    resource_level: str


class ProjectForm(BaseModel):
    grade: str = ""
    topic: str = ""
    resources: Literal["", "A", "B", "C", "D", "E", "F"] = ""
    time: str = ""

    def is_complete(self) -> bool:
        return all(value.strip() for value in (self.grade, self.topic, self.resources, self.time))


class SavedProject(BaseModel):
    """A plan saved to the local history; keys keep their stored camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    grade: str
    topic: str
    resources: str
    time: str
    proposal_name: str = Field(alias="proposalName")
    plan_markdown: str = Field(alias="planMarkdown")


class EditingOptions(BaseModel):
    editable: bool = False
    from_history: bool = False
    project_id: int | None = None
