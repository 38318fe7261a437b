"""Analysis session state and the controller that drives it.

The session is an immutable ``SessionState``; every user action is a pure
function from the current state (and, for finished work, its result) to a
new state. ``SessionController`` owns the current state and runs the
services that actions require.

Lifecycle: IDLE -> ANALYZING -> COMPLETE or ERROR, and back to IDLE only
through ``reset``. Article, concept and notes tasks run only while COMPLETE
and never change the top-level state.

Every analysis request gets a sequence number. A completion whose number is
not the current one belongs to a superseded request and is discarded.
"""

from __future__ import annotations

from collections.abc import Coroutine
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from tubemind.core.errors import GatewayError, MalformedOutputError, SessionError
from tubemind.core.models import (
    AnalysisResult,
    AppState,
    GeneratedArticle,
    TabView,
    VideoConcept,
)
from tubemind.services.analysis import AnalysisService
from tubemind.services.content import ContentService

EMPTY_URL_MESSAGE = "Please enter a YouTube video URL."
RESET_REQUIRED_MESSAGE = "Reset the session before analyzing another video."
ANALYSIS_FAILED_MESSAGE = "Video analysis failed. Please try again."

ARTICLE_ERROR = GeneratedArticle(title="Error", content="Failed to generate article.")
CONCEPT_ERROR = VideoConcept(
    title="Error",
    hook="Failed to generate video concept.",
    outline=[],
    target_audience="",
)


class Task(StrEnum):
    """Secondary operations available on a completed analysis."""

    ARTICLE = "article"
    CONCEPT = "concept"
    NOTES = "notes"


_TASK_TABS = {Task.ARTICLE: TabView.ARTICLE, Task.CONCEPT: TabView.CONCEPT}


@dataclass(frozen=True)
class SessionState:
    """Everything a session shows or needs to decide the next transition."""

    app_state: AppState = AppState.IDLE
    url: str = ""
    active_tab: TabView = TabView.DASHBOARD
    analysis: AnalysisResult | None = None
    article: GeneratedArticle | None = None
    concept: VideoConcept | None = None
    notes: str = ""
    message: str | None = None
    request_id: int = 0
    pending: frozenset[Task] = frozenset()
    task_errors: dict[Task, str] = field(default_factory=dict)


def start_analysis(state: SessionState, url: str) -> SessionState:
    """Begin analyzing ``url``.

    A blank URL leaves the state unchanged apart from the validation
    message. Starting while ANALYZING supersedes the pending request.
    """
    if not url.strip():
        return replace(state, message=EMPTY_URL_MESSAGE)
    if state.app_state in (AppState.COMPLETE, AppState.ERROR):
        return replace(state, message=RESET_REQUIRED_MESSAGE)

    return replace(
        state,
        app_state=AppState.ANALYZING,
        url=url.strip(),
        message=None,
        request_id=state.request_id + 1,
    )


def _is_current(state: SessionState, request_id: int) -> bool:
    return state.app_state is AppState.ANALYZING and request_id == state.request_id


def _describe(error: BaseException) -> str:
    return str(error) or type(error).__name__


def analysis_succeeded(
    state: SessionState, request_id: int, result: AnalysisResult
) -> SessionState:
    """Store a finished analysis and show the dashboard."""
    if not _is_current(state, request_id):
        return state
    return replace(
        state,
        app_state=AppState.COMPLETE,
        analysis=result,
        active_tab=TabView.DASHBOARD,
        message=None,
    )


def analysis_failed(state: SessionState, request_id: int, message: str) -> SessionState:
    """Move to ERROR without storing a result."""
    if not _is_current(state, request_id):
        return state
    return replace(state, app_state=AppState.ERROR, analysis=None, message=message)


def reset(state: SessionState) -> SessionState:
    """Return to IDLE, dropping every result, the notes and the URL.

    The request counter keeps counting so that completions of requests
    started before the reset stay stale.
    """
    return SessionState(request_id=state.request_id)


def select_tab(state: SessionState, tab: TabView) -> SessionState:
    """Switch the active view."""
    return replace(state, active_tab=tab)


def set_notes(state: SessionState, notes: str) -> SessionState:
    """Replace the user's notes text."""
    return replace(state, notes=notes)


def begin_task(state: SessionState, task: Task) -> SessionState:
    """Mark ``task`` as running.

    Raises:
        SessionError: If no completed analysis is available.
    """
    if state.app_state is not AppState.COMPLETE or state.analysis is None:
        raise SessionError(f"Cannot run {task} without a completed analysis")

    errors = {key: value for key, value in state.task_errors.items() if key is not task}
    return replace(
        state,
        active_tab=_TASK_TABS.get(task, state.active_tab),
        pending=state.pending | {task},
        task_errors=errors,
    )


def task_succeeded(
    state: SessionState,
    request_id: int,
    task: Task,
    value: GeneratedArticle | VideoConcept | str,
) -> SessionState:
    """Store the result of ``task``, replacing any earlier one.

    ``request_id`` is the analysis the task was started on; results for any
    other analysis are discarded.
    """
    if state.app_state is not AppState.COMPLETE or request_id != state.request_id:
        return state

    pending = state.pending - {task}
    if task is Task.ARTICLE:
        return replace(state, article=value, pending=pending)
    if task is Task.CONCEPT:
        return replace(state, concept=value, pending=pending)
    return replace(state, notes=value, pending=pending)


def task_failed(state: SessionState, request_id: int, task: Task, message: str) -> SessionState:
    """Record a failed task; article and concept show a fixed error result."""
    if state.app_state is not AppState.COMPLETE or request_id != state.request_id:
        return state

    changes: dict[str, object] = {
        "pending": state.pending - {task},
        "task_errors": {**state.task_errors, task: message},
    }
    if task is Task.ARTICLE:
        changes["article"] = ARTICLE_ERROR
    elif task is Task.CONCEPT:
        changes["concept"] = CONCEPT_ERROR
    return replace(state, **changes)


class SessionController:
    """Applies user actions to a session and runs the services they need."""

    def __init__(
        self,
        analysis_service: AnalysisService,
        content_service: ContentService,
        state: SessionState | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            analysis_service: Service used for video analysis
            content_service: Service used for articles, concepts and notes
            state: Initial state, a fresh IDLE session if None
        """
        self.analysis_service = analysis_service
        self.content_service = content_service
        self.state = state or SessionState()

    async def start_analysis(self, url: str) -> SessionState:
        """Analyze ``url`` and store the outcome.

        Any failure of the analysis moves the session to ERROR. Errors other
        than GatewayError are re-raised after the transition.
        """
        self.state = start_analysis(self.state, url)
        if self.state.app_state is not AppState.ANALYZING or self.state.message is not None:
            return self.state

        request_id = self.state.request_id
        try:
            result = await self.analysis_service.analyze(self.state.url)
        except GatewayError as e:
            self.state = analysis_failed(self.state, request_id, f"{ANALYSIS_FAILED_MESSAGE} ({e})")
        except BaseException as e:
            self.state = analysis_failed(
                self.state, request_id, f"{ANALYSIS_FAILED_MESSAGE} ({_describe(e)})"
            )
            raise
        else:
            self.state = analysis_succeeded(self.state, request_id, result)
        return self.state

    async def _run_task(
        self,
        task: Task,
        call: Coroutine[Any, Any, GeneratedArticle | VideoConcept | str],
        recovered: tuple[type[Exception], ...],
    ) -> SessionState:
        request_id = self.state.request_id
        try:
            value = await call
        except recovered as e:
            self.state = task_failed(self.state, request_id, task, str(e))
        except BaseException as e:
            self.state = task_failed(self.state, request_id, task, _describe(e))
            raise
        else:
            self.state = task_succeeded(self.state, request_id, task, value)
        return self.state

    async def generate_article(self) -> SessionState:
        """Write an article from the summary and full transcript."""
        self.state = begin_task(self.state, Task.ARTICLE)
        analysis = self.state.analysis
        assert analysis is not None

        context = f"{analysis.summary}\n{analysis.full_transcript or ''}"
        return await self._run_task(
            Task.ARTICLE,
            self.content_service.generate_article(context),
            (GatewayError,),
        )

    async def generate_concept(self) -> SessionState:
        """Design a video concept from the summary."""
        self.state = begin_task(self.state, Task.CONCEPT)
        analysis = self.state.analysis
        assert analysis is not None

        return await self._run_task(
            Task.CONCEPT,
            self.content_service.generate_video_concept(analysis.summary),
            (GatewayError, MalformedOutputError),
        )

    async def refine_notes(self, notes: str | None = None) -> SessionState:
        """Refine the session notes, optionally replacing them first.

        Blank notes are left alone and no request is made.
        """
        if notes is not None:
            self.state = set_notes(self.state, notes)
        if not self.state.notes.strip():
            return self.state

        self.state = begin_task(self.state, Task.NOTES)
        analysis = self.state.analysis
        assert analysis is not None

        context = analysis.full_transcript or analysis.summary
        return await self._run_task(
            Task.NOTES,
            self.content_service.refine_notes(self.state.notes, context),
            (GatewayError,),
        )

    def reset(self) -> SessionState:
        """Discard the session and return to IDLE."""
        self.state = reset(self.state)
        return self.state

    def select_tab(self, tab: TabView) -> SessionState:
        """Switch the active view."""
        self.state = select_tab(self.state, tab)
        return self.state

    def set_notes(self, notes: str) -> SessionState:
        """Replace the notes text."""
        self.state = set_notes(self.state, notes)
        return self.state
