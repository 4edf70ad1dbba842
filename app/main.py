"""FastAPI application: lesson-plan generation, refinement, history, podcast and PDF."""

from contextlib import asynccontextmanager
import asyncio
import concurrent.futures
import io
import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, StreamingResponse

from app.config import settings
from app.db.connection import close_pool
from app.db.repository_factory import get_repository
from app.documents.editor import DocumentEditor
from app.documents.markdown import render_markdown
from app.documents.refinement import REPLACE
from app.export.pdf_export import export_pdf
from app.export.printable import ExportOptions, PrintableDocument
from app.graph.builder import build_graph
from app.llm.ollama_client import get_chat_model
from app.models.state import AppState, ChatContext
from app.narration.gtts_engine import GTTSEngine
from app.narration.player import NarrationPlayer, select_voice
from app.narration.script import generate_podcast_script
from app.schemas.api import (
    AppStatusResponse,
    DeleteProjectResponse,
    EditorResponse,
    ExportRequest,
    PlanRequest,
    PlanResponse,
    PodcastResponse,
    ProjectListResponse,
    ProposalsResponse,
    RefineMessageRequest,
    RefineMessageResponse,
    RefineStartRequest,
    RefineStartResponse,
    RenderRequest,
    RenderResponse,
    SectionsUpdateRequest,
    ViewRequest,
)
from app.schemas.project import EditingOptions, ProjectForm, Proposal, SavedProject
from app.utils import constants as msg

logger = logging.getLogger("uvicorn.error")

model_available = True


@asynccontextmanager
async def lifespan(app: FastAPI):
    global model_available
    try:
        get_chat_model()
        model_available = True
    except Exception as exc:
        logger.error("Error initializing chat model: %s", exc)
        model_available = False
    yield
    if state.podcast is not None:
        state.podcast.stop()
    close_pool()


app = FastAPI(title="MentorSTEM+ Planner", version="0.1.0", lifespan=lifespan)

graph = build_graph()
state = AppState()
get_narration_engine = GTTSEngine


def _run_graph(state_input: dict) -> dict:
    """Invoke the graph in a worker thread, answering 504 after the timeout.

    The generation itself is not cancelled on timeout; its result is dropped.
    """
    stage = state_input.get("stage")
    logger.info("Graph invoke started (%s)", stage)
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(graph.invoke, state_input)
        done, _ = concurrent.futures.wait([future], timeout=settings.chat_timeout_seconds)
        if not done:
            logger.error("Graph invoke timed out (%s)", stage)
            raise HTTPException(status_code=504, detail="Chat processing timed out")
        result = future.result()
    finally:
        executor.shutdown(wait=False)
    logger.info("Graph invoke finished (%s)", stage)
    return result


def _require_model() -> None:
    if not model_available:
        raise HTTPException(status_code=503, detail=msg.MODEL_UNAVAILABLE_MESSAGE)


def _require_plan(allow_editing: bool = False) -> str:
    if not state.plan_markdown:
        raise HTTPException(status_code=404, detail=msg.NO_PLAN_MESSAGE)
    if state.options.editable and not allow_editing:
        raise HTTPException(status_code=409, detail=msg.EDIT_MODE_MESSAGE)
    return state.plan_markdown


def _plan_response() -> PlanResponse:
    markdown = state.plan_markdown or ""
    editor = state.editor or DocumentEditor(markdown, editable=state.options.editable)
    return PlanResponse(
        proposal_name=state.proposal_name or "",
        plan_markdown=markdown,
        preamble=editor.plan.preamble,
        preamble_html=render_markdown(editor.plan.preamble),
        sections=editor.render(),
        options=state.options,
    )


def _get_saved_project(project_id: int) -> SavedProject:
    project = get_repository().get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail=msg.PROJECT_NOT_FOUND_MESSAGE)
    return project


def _acquire_document_lock() -> None:
    if not state.document_lock.acquire(blocking=False):
        raise HTTPException(status_code=409, detail=msg.DOCUMENT_BUSY_MESSAGE)


@app.get("/state", response_model=AppStatusResponse)
def get_state():
    return AppStatusResponse(
        view=state.view,
        proposal_name=state.proposal_name,
        options=state.options,
        has_plan=bool(state.plan_markdown),
        chat_active=state.chat is not None,
        podcast=state.podcast.status() if state.podcast is not None else None,
    )


@app.post("/view", response_model=AppStatusResponse)
def change_view(request: ViewRequest):
    state.show_view(request.view)
    if request.view == "form":
        state.form = None
    return get_state()


@app.post("/proposals", response_model=ProposalsResponse)
def generate_proposals(form: ProjectForm):
    """Ask the main session for three project proposals.

    An incomplete form is rejected before any model call. A model failure
    sends the view back to the form.
    """
    if not form.is_complete():
        raise HTTPException(status_code=400, detail=msg.FORM_INCOMPLETE_MESSAGE)
    _require_model()

    state.form = form
    state.show_view("loading")
    state_input = {
        "messages": list(state.main_messages),
        "stage": "PROPOSALS",
        "form": form.model_dump(),
    }
    try:
        result = _run_graph(state_input)
    except HTTPException:
        state.show_view("form")
        raise
    except Exception as exc:
        logger.error("Error sending message to model: %s", exc)
        state.show_view("form")
        raise HTTPException(status_code=502, detail=msg.PROPOSALS_ERROR_MESSAGE) from exc

    state.main_messages = result.get("messages", state.main_messages)
    state.proposals = [Proposal.model_validate(item) for item in result.get("proposals", [])]
    state.show_view("proposals")
    return ProposalsResponse(proposals=state.proposals, diagnostic=result.get("diagnostic"))


@app.post("/plan", response_model=PlanResponse)
def generate_plan(request: PlanRequest):
    """Generate the detailed plan for one of the last proposals."""
    if request.proposal_name not in {proposal.name for proposal in state.proposals}:
        raise HTTPException(status_code=400, detail=msg.UNKNOWN_PROPOSAL_MESSAGE)
    _require_model()

    state.show_view("loading")
    state_input = {
        "messages": list(state.main_messages),
        "stage": "PLAN",
        "proposal_name": request.proposal_name,
    }
    try:
        result = _run_graph(state_input)
    except HTTPException:
        state.show_view("proposals")
        raise
    except Exception as exc:
        logger.error("Error sending message to model for plan: %s", exc)
        state.show_view("proposals")
        raise HTTPException(status_code=502, detail=msg.PLAN_ERROR_MESSAGE) from exc

    state.main_messages = result.get("messages", state.main_messages)
    state.show_plan(result.get("plan_markdown", ""), request.proposal_name, EditingOptions())
    return _plan_response()


@app.post("/render", response_model=RenderResponse)
def render(request: RenderRequest):
    return RenderResponse(html=render_markdown(request.markdown))


@app.get("/plan", response_model=PlanResponse)
def current_plan():
    _require_plan(allow_editing=True)
    return _plan_response()


@app.get("/plan/editor", response_model=EditorResponse)
def plan_editor():
    markdown = _require_plan(allow_editing=True)
    editor = DocumentEditor(markdown, editable=True)
    return EditorResponse(
        proposal_name=state.proposal_name or "",
        preamble=editor.plan.preamble,
        sections=editor.render_editable(),
        options=state.options,
    )


@app.post("/plan/sections/{index}/toggle", response_model=PlanResponse)
def toggle_section(index: int):
    """Collapse or expand one section of the plan on screen."""
    _require_plan(allow_editing=True)
    if state.editor is None or not 0 <= index < len(state.editor.titles):
        raise HTTPException(status_code=404, detail=msg.SECTION_NOT_FOUND_MESSAGE)
    state.editor.toggle(index)
    return _plan_response()


# --- Refinement ---


@app.post("/refine/start", response_model=RefineStartResponse)
def start_refinement(request: RefineStartRequest):
    """Open a fresh refinement session primed with the current plan."""
    if request.project_id is not None:
        project = _get_saved_project(request.project_id)
        state.show_view("history")
        state.show_plan(
            project.plan_markdown,
            project.proposal_name,
            EditingOptions(from_history=True, project_id=project.id),
        )
    markdown = _require_plan()
    _require_model()

    state.chat = None
    state_input = {"messages": [], "stage": "REFINE_CONTEXT", "plan_markdown": markdown}
    try:
        result = _run_graph(state_input)
    except HTTPException:
        raise
    except Exception as exc:
        logger.error("Failed to set initial chat context: %s", exc)
        raise HTTPException(status_code=502, detail=msg.REFINEMENT_START_ERROR_MESSAGE) from exc

    state.chat = ChatContext(
        document=markdown,
        proposal_name=state.proposal_name or "",
        options=state.options.model_copy(),
        messages=result.get("messages", []),
    )
    return RefineStartResponse(greeting=result.get("final_response") or msg.REFINEMENT_GREETING)


@app.post("/refine/message", response_model=RefineMessageResponse)
def refine_message(request: RefineMessageRequest):
    """Run one refinement turn; a full-plan reply replaces the canonical plan.

    Only one turn runs at a time; a submission while another is in flight,
    or while a manual save writes the plan, gets 409.
    """
    chat = state.chat
    if chat is None:
        raise HTTPException(status_code=409, detail=msg.REFINEMENT_INACTIVE_MESSAGE)
    _acquire_document_lock()
    try:
        state_input = {
            "messages": list(chat.messages),
            "stage": "REFINE",
            "user_input": request.message.strip(),
            "plan_markdown": chat.document,
        }
        try:
            result = _run_graph(state_input)
        except HTTPException:
            raise
        except Exception as exc:
            logger.error("Error during chat: %s", exc)
            raise HTTPException(status_code=502, detail=msg.REFINEMENT_ERROR_MESSAGE) from exc

        chat.messages = result.get("messages", chat.messages)
        kind = result.get("refinement_kind", "")
        reply = result.get("final_response", "")
        if kind == REPLACE:
            chat.document = result.get("plan_markdown", chat.document)
            if state.chat is chat:
                state.show_plan(chat.document, chat.proposal_name, chat.options)
            if chat.options.project_id is not None:
                get_repository().update_plan(chat.options.project_id, chat.document)
            reply_html = reply
        else:
            reply_html = render_markdown(reply)

        return RefineMessageResponse(
            kind=kind,
            reply_html=reply_html,
            plan_markdown=chat.document,
            changed_sections=result.get("changed_sections", []),
            sections=DocumentEditor(chat.document).render(),
        )
    finally:
        state.document_lock.release()


@app.delete("/refine")
def close_refinement():
    state.chat = None
    return {"active": False}


# --- History ---


@app.get("/projects", response_model=ProjectListResponse)
def list_projects():
    projects = get_repository().list_projects()
    return ProjectListResponse(count=len(projects), projects=projects)


@app.post("/projects", response_model=SavedProject)
def save_project():
    """Save the freshly generated plan on screen to the history."""
    markdown = _require_plan()
    if state.form is None or state.options.from_history:
        raise HTTPException(status_code=400, detail=msg.NOTHING_TO_SAVE_MESSAGE)
    if state.options.project_id is not None:
        raise HTTPException(status_code=409, detail=msg.ALREADY_SAVED_MESSAGE)

    _acquire_document_lock()
    try:
        repo = get_repository()
        project = SavedProject(
            id=repo.new_project_id(),
            grade=state.form.grade,
            topic=state.form.topic,
            resources=state.form.resources,
            time=state.form.time,
            proposal_name=state.proposal_name or "",
            plan_markdown=markdown,
        )
        repo.save_project(project)
        state.options = state.options.model_copy(update={"project_id": project.id})
        if state.chat is not None:
            state.chat.options = state.options.model_copy()
    finally:
        state.document_lock.release()
    logger.info("Project %s saved to history", project.id)
    return project


@app.get("/projects/{project_id}", response_model=PlanResponse)
def open_project(project_id: int, edit: bool = False):
    """Show a saved plan, read-only or with editable section bodies."""
    project = _get_saved_project(project_id)
    state.show_view("history")
    state.show_plan(
        project.plan_markdown,
        project.proposal_name,
        EditingOptions(editable=edit, from_history=not edit, project_id=project.id),
    )
    return _plan_response()


@app.put("/projects/{project_id}/sections", response_model=PlanResponse)
def update_project_sections(project_id: int, request: SectionsUpdateRequest):
    """Reassemble a saved plan from edited bodies and store it."""
    project = _get_saved_project(project_id)
    _acquire_document_lock()
    try:
        try:
            new_markdown = DocumentEditor(project.plan_markdown, editable=True).reassemble(request.bodies)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        get_repository().update_plan(project_id, new_markdown)
    finally:
        state.document_lock.release()

    state.show_plan(
        new_markdown,
        project.proposal_name,
        EditingOptions(from_history=True, project_id=project_id),
    )
    return _plan_response()


@app.delete("/projects/{project_id}", response_model=DeleteProjectResponse)
def delete_project(project_id: int):
    repo = get_repository()
    if not repo.delete_project(project_id):
        raise HTTPException(status_code=404, detail=msg.PROJECT_NOT_FOUND_MESSAGE)
    if state.options.project_id == project_id:
        state.options = state.options.model_copy(update={"project_id": None})
    return DeleteProjectResponse(deleted=True, count=repo.count())


# --- Podcast ---


def _require_podcast() -> NarrationPlayer:
    if state.podcast is None:
        raise HTTPException(status_code=404, detail=msg.NO_PODCAST_MESSAGE)
    return state.podcast


@app.post("/podcast", response_model=PodcastResponse)
async def create_podcast():
    """Write a spoken summary of the plan and load it into a fresh player."""
    markdown = _require_plan()
    _require_model()
    try:
        script = await asyncio.to_thread(generate_podcast_script, markdown)
    except Exception as exc:
        logger.error("Error generating podcast script: %s", exc)
        raise HTTPException(status_code=502, detail=msg.PODCAST_ERROR_MESSAGE) from exc
    if not script.strip():
        raise HTTPException(status_code=502, detail=msg.PODCAST_ERROR_MESSAGE)

    if state.podcast is not None:
        state.podcast.stop()
    engine = get_narration_engine()
    player = NarrationPlayer(script, engine, select_voice(engine.list_voices()))
    state.podcast = player
    return PodcastResponse(script=player.script, sentences=player.sentences, status=player.status())


@app.get("/podcast")
async def podcast_status():
    return _require_podcast().status()


@app.post("/podcast/play")
async def podcast_play():
    player = _require_podcast()
    player.play()
    return player.status()


@app.post("/podcast/pause")
async def podcast_pause():
    player = _require_podcast()
    player.pause()
    return player.status()


@app.post("/podcast/resume")
async def podcast_resume():
    player = _require_podcast()
    player.resume()
    return player.status()


@app.post("/podcast/stop")
async def podcast_stop():
    player = _require_podcast()
    player.stop()
    return player.status()


@app.get("/podcast/script.txt", response_class=PlainTextResponse)
async def podcast_script():
    player = _require_podcast()
    return PlainTextResponse(
        player.script,
        headers={"Content-Disposition": f"attachment; filename={msg.PODCAST_SCRIPT_FILENAME}"},
    )


@app.get("/podcast/clips/{index}")
async def podcast_clip(index: int):
    clip = _require_podcast().clips.get(index)
    if clip is None:
        raise HTTPException(status_code=404, detail=msg.PODCAST_CLIP_MISSING_MESSAGE)
    return FileResponse(clip, media_type="audio/mpeg")


# --- Export ---


@app.post("/export/pdf")
def export_plan_pdf(request: ExportRequest):
    """Download the plan as PDF with teacher and school filled in."""
    if request.project_id is not None:
        project = _get_saved_project(request.project_id)
        markdown, proposal_name = project.plan_markdown, project.proposal_name
    else:
        markdown, proposal_name = _require_plan(), state.proposal_name or ""

    document = PrintableDocument.from_plan(markdown, proposal_name)
    options = ExportOptions.for_proposal(proposal_name)
    try:
        pdf_bytes = export_pdf(document, options, request.teacher_name, request.school_name)
    except Exception as exc:
        logger.error("Error generating PDF: %s", exc)
        raise HTTPException(status_code=500, detail=msg.PDF_ERROR_MESSAGE) from exc

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={options.filename}"},
    )
