"""
NeuroMuscle Session Service
One viewer's selection, its in-flight exercise query and the visible outcome.

Each query is tagged with a request sequence number and the region it was
issued for; a result is applied only while that tag is still current, so
a slow answer for a previous region never replaces a newer one.
"""
import asyncio
import uuid
from typing import Optional

import muscle_map
from exercise_service import ExerciseQueryPipeline, get_pipeline
from logging_utils import get_logger
from models import FailureReason, PointerEvent, QueryOutcome, SessionView
from prompt_builder import build_request
from scene import SceneClock, build_scene, dispatch_pointer
from selection import SelectionController

logger = get_logger(__name__)


class ExerciseSession:
    """Selection state plus the exercise outcome for the current selection."""

    def __init__(
            self,
            pipeline: Optional[ExerciseQueryPipeline] = None,
            session_id: Optional[str] = None,
            clock: Optional[SceneClock] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.pipeline = pipeline or get_pipeline()
        self.clock = clock or SceneClock()
        self.controller = SelectionController()
        self.controller.subscribe(self._on_selection_changed)

        self.outcome: Optional[QueryOutcome] = None
        self.loading = False
        self._sequence = 0
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------

    def _on_selection_changed(self, region_id: str) -> None:
        # Drop the previous region's outcome before the new query starts
        self._sequence += 1
        self.outcome = None
        self.loading = True
        logger.info("[Session %s] Selected %s (request #%d)", self.session_id[:8], region_id, self._sequence)

    async def select(self, region_id: str) -> bool:
        """Select a region and wait for its query. Returns False on a no-op."""
        if not self.controller.select_region(region_id):
            return False
        await self._run_query(self._sequence, self.controller.selected)
        return True

    def start_select(self, region_id: str) -> bool:
        """Select a region and run its query in the background."""
        if not self.controller.select_region(region_id):
            return False
        self._schedule(self._sequence, self.controller.selected)
        return True

    def handle_pointer(self, event: PointerEvent) -> tuple[Optional[str], bool]:
        """
        Dispatch a renderer pointer event.
        Returns (resolved region id, whether a new query was started).
        """
        before = self._sequence
        region_id = dispatch_pointer(self.controller, event)
        started = self._sequence != before
        if started:
            self._schedule(self._sequence, self.controller.selected)
        return region_id, started

    def hover(self, region_id: Optional[str]) -> None:
        self.controller.set_hover(region_id)

    def leave(self, region_id: Optional[str] = None) -> None:
        self.controller.pointer_leave(region_id)

    # ------------------------------------------------------------
    # Query
    # ------------------------------------------------------------

    def _schedule(self, sequence: int, region_id: str) -> None:
        task = asyncio.get_running_loop().create_task(self._run_query(sequence, region_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_query(self, sequence: int, region_id: str) -> bool:
        """Execute the query for one tagged request. Returns True if the result was applied."""
        request = build_request(muscle_map.anatomical_name(region_id))

        try:
            outcome = await self.pipeline.execute(request)
        except Exception as e:
            logger.exception("[Session %s] Query for %s crashed", self.session_id[:8], region_id)
            outcome = QueryOutcome.failed(FailureReason.TRANSPORT_ERROR, f"Query failed: {e}")

        if sequence != self._sequence or region_id != self.controller.selected:
            logger.info(
                "[Session %s] Discarding stale result for %s (request #%d, current #%d)",
                self.session_id[:8], region_id, sequence, self._sequence,
            )
            return False

        self.outcome = outcome
        self.loading = False
        return True

    async def wait_idle(self) -> None:
        """Wait for every background query started by this session."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------

    def view(self) -> SessionView:
        selected = self.controller.selected
        return SessionView(
            session_id=self.session_id,
            selection=self.controller.snapshot(),
            title=muscle_map.display_label(selected) if selected else None,
            loading=self.loading,
            outcome=self.outcome,
        )

    def scene(self, elapsed_sec: Optional[float] = None):
        t = self.clock.elapsed() if elapsed_sec is None else elapsed_sec
        return build_scene(self.controller, t)
