"""Shared graph state and the application state owned by the HTTP controller."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal

from typing_extensions import TypedDict

from langchain_core.messages import BaseMessage
from langgraph.graph.message import add_messages

from app.documents.editor import DocumentEditor
from app.schemas.project import EditingOptions, ProjectForm, Proposal

AppView = Literal["form", "proposals", "plan", "history", "loading", "help"]


class GraphState(TypedDict, total=False):
    """State passed between the generation graph nodes.

    Fields
    ------
    messages : list[BaseMessage]
        History of the session this run talks to (main or refinement),
        extended by the ``add_messages`` reducer.
    stage : str
        Entry selector: PROPOSALS | PLAN | REFINE_CONTEXT | REFINE.
    form : dict[str, str]
        Grade, topic, resource tier and duration from the form.
    proposal_name : str
        Proposal the plan is (or was) generated for.
    user_input : str
        Teacher message for a refinement turn.
    plan_markdown : str
        Canonical plan document.
    raw_response : str
        Accumulated streamed text of the model reply.
    proposals : list[dict]
        Extracted proposals (PROPOSALS stage).
    diagnostic : str | None
        Message explaining an empty proposal extraction.
    refinement_kind : str
        EXPLAIN or REPLACE after a refinement turn.
    candidate_plan : str
        Document proposed by a refinement turn.
    changed_sections : list[str]
        Titles that differ between the old and the candidate plan.
    sections : list[dict]
        Re-split sections of the plan after generation or replacement.
    user_response : str
        Text produced by the stage node.
    final_response : str
        Response returned to the caller.
    """

    messages: Annotated[list[BaseMessage], add_messages]
    stage: str
    form: dict[str, str]
    proposal_name: str
    user_input: str
    plan_markdown: str
    raw_response: str
    proposals: list[dict[str, Any]]
    diagnostic: str | None
    refinement_kind: str
    candidate_plan: str
    changed_sections: list[str]
    sections: list[dict[str, Any]]
    user_response: str
    final_response: str


@dataclass
class ChatContext:
    """A live refinement session; at most one exists at a time."""

    document: str
    proposal_name: str
    options: EditingOptions
    messages: list[BaseMessage] = field(default_factory=list)


@dataclass
class AppState:
    """Everything the single local user has on screen.

    ``document_lock`` is held while a refinement turn is in flight and while
    a manual save writes the plan, so the two never interleave.
    """

    view: AppView = "form"
    form: ProjectForm | None = None
    main_messages: list[BaseMessage] = field(default_factory=list)
    proposals: list[Proposal] = field(default_factory=list)
    plan_markdown: str | None = None
    proposal_name: str | None = None
    options: EditingOptions = field(default_factory=EditingOptions)
    chat: ChatContext | None = None
    editor: DocumentEditor | None = None
    podcast: Any = None
    document_lock: threading.Lock = field(default_factory=threading.Lock)

    def show_plan(self, markdown: str, proposal_name: str, options: EditingOptions | None = None) -> None:
        self.plan_markdown = markdown
        self.proposal_name = proposal_name
        self.options = options or EditingOptions()
        # A fresh editor: only the first section starts expanded.
        self.editor = DocumentEditor(markdown, editable=self.options.editable)
        self.view = "plan"

    def show_view(self, view: AppView) -> None:
        """Switch views; leaving the plan closes refinement and narration."""
        if view != "plan":
            self.chat = None
            if self.podcast is not None:
                self.podcast.stop()
                self.podcast = None
        self.view = view
