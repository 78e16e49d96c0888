"""Sequential research workflow for one destination.

The orchestrator walks :data:`RESEARCH_SEQUENCE` strictly in order. Each
task's argument builder sees a read-only snapshot of everything collected so
far, which is how later tools pick up the country, coordinates and currency
resolved by earlier ones. Tool failures are never fatal: they are reported as
``tool_call`` errors and simply leave their key out of the collected data.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from travel_guide.core.enrichment import SummaryRewriter
from travel_guide.core.resolve import dig, first_text
from travel_guide.core.schemas import ResearchEvent, ResearchStep, ToolCallInfo, ToolResult, TravelGuide
from travel_guide.core.synthesizer import synthesize_guide

logger = logging.getLogger(__name__)

DESTINATION_REQUIRED = "Destination is required"

STEP_DEFINITIONS: Tuple[Tuple[str, str, str], ...] = (
    ("init", "Initializing research", "Starting comprehensive destination analysis"),
    ("overview", "Researching destination", "Gathering general information and context"),
    ("cities", "Analyzing cities", "Ranking and comparing cities and regions"),
    ("places", "Discovering attractions", "Finding must-see places and hidden gems"),
    ("neighborhoods", "Comparing neighborhoods", "Evaluating where to stay"),
    ("costs", "Estimating costs", "Calculating realistic budget ranges"),
    ("transport", "Mapping transportation", "Understanding how to get around"),
    ("safety", "Analyzing safety", "Reviewing travel advisories and concerns"),
    ("culture", "Understanding culture", "Learning customs and etiquette"),
    ("tips", "Gathering insights", "Collecting local tips and common mistakes"),
    ("images", "Finding visuals", "Sourcing destination imagery"),
    ("synthesize", "Creating guide", "Synthesizing research into premium guide"),
)

PROGRESS_START = 5
PROGRESS_FLOOR = 10
PROGRESS_SPAN = 80
PROGRESS_SYNTHESIS = 95
PROGRESS_DONE = 100

ArgsBuilder = Callable[[str, Mapping[str, Any]], Dict[str, Any]]
CancelCheck = Callable[[], Awaitable[bool]]
Synthesizer = Callable[[str, Mapping[str, Any]], TravelGuide]


class ToolInvoker(Protocol):
    async def invoke(self, name: str, args: Mapping[str, Any]) -> ToolResult: ...


def research_steps() -> List[ResearchStep]:
    """Fresh, all-pending copies of the twelve research steps."""

    return [ResearchStep(id=step_id, name=name, description=description) for step_id, name, description in STEP_DEFINITIONS]


@dataclass(frozen=True)
class ResearchTask:
    """One scheduled tool invocation and the step it is shown under."""

    tool_name: str
    build_args: ArgsBuilder
    step_index: int


# ---------------------------------------------------------------------------
# Argument builders: pure functions of (destination, collected snapshot)
# ---------------------------------------------------------------------------


def _drop_none(args: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in args.items() if value is not None}


def _country_name(destination: str, data: Mapping[str, Any]) -> str:
    return first_text(
        dig(data, "get_country_info.name"),
        dig(data, "search_destination.country"),
        default=destination,
    )


def _country_code(data: Mapping[str, Any]) -> Optional[str]:
    return first_text(
        dig(data, "get_country_info.cca2"),
        dig(data, "search_destination.countryCode"),
        default=None,
    )


def _location(destination: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "lat": dig(data, "search_destination.location.lat"),
        "lon": dig(data, "search_destination.location.lon"),
    }


def _country_scoped(destination: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    return _drop_none({"destination": _country_name(destination, data), "country_code": _country_code(data)})


RESEARCH_SEQUENCE: Tuple[ResearchTask, ...] = (
    ResearchTask("search_destination", lambda dest, data: {"destination": dest}, 1),
    ResearchTask(
        "get_country_info",
        lambda dest, data: _drop_none(
            {
                "country": first_text(dig(data, "search_destination.country"), default=dest),
                "country_code": dig(data, "search_destination.countryCode"),
            }
        ),
        1,
    ),
    ResearchTask(
        "get_city_info",
        lambda dest, data: _drop_none({"destination": dest, "country_code": _country_code(data), "limit": 5}),
        2,
    ),
    ResearchTask(
        "search_attractions",
        lambda dest, data: _drop_none({"destination": dest, **_location(dest, data), "limit": 15}),
        3,
    ),
    ResearchTask(
        "get_neighborhoods",
        lambda dest, data: _drop_none({"city": dest, **_location(dest, data), "limit": 8}),
        4,
    ),
    ResearchTask(
        "get_budget_info",
        lambda dest, data: _drop_none(
            {
                **_country_scoped(dest, data),
                "currency": dig(data, "get_country_info.currency.code"),
                "base_currency": "USD",
            }
        ),
        5,
    ),
    ResearchTask(
        "get_weather",
        lambda dest, data: _drop_none({"destination": dest, **_location(dest, data)}),
        5,
    ),
    ResearchTask(
        "get_transportation",
        lambda dest, data: _drop_none(
            {
                "destination": dest,
                **_location(dest, data),
                "driving_side": dig(data, "get_country_info.drivingSide"),
            }
        ),
        6,
    ),
    ResearchTask("get_safety_info", _country_scoped, 7),
    ResearchTask("get_culture_info", _country_scoped, 8),
    ResearchTask(
        "get_local_tips",
        lambda dest, data: _drop_none({"destination": dest, "country_code": _country_code(data)}),
        9,
    ),
    ResearchTask(
        "search_images",
        lambda dest, data: {"query": f"{dest} travel landmarks tourism", "count": 15},
        10,
    ),
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def task_progress(completed: int, total: int) -> int:
    """Linear progress between the floor and ceiling, rounded half up."""

    return int(math.floor(PROGRESS_FLOOR + PROGRESS_SPAN * completed / total + 0.5))


class ResearchOrchestrator:
    """Runs the research sequence and yields the stream of research events."""

    def __init__(
        self,
        registry: ToolInvoker,
        *,
        synthesizer: Synthesizer = synthesize_guide,
        enricher: Optional[SummaryRewriter] = None,
        tasks: Sequence[ResearchTask] = RESEARCH_SEQUENCE,
        step_delay_s: float = 0.1,
    ) -> None:
        self.registry = registry
        self.synthesizer = synthesizer
        self.enricher = enricher
        self.tasks = tuple(tasks)
        self.step_delay_s = step_delay_s

    async def run(
        self,
        destination: Optional[str],
        *,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> AsyncIterator[ResearchEvent]:
        """Yield ``step``/``tool_call``/``progress`` events, then ``complete``.

        An empty destination yields a single ``error`` event. When
        ``is_cancelled`` reports true before a task, the run stops silently.
        """

        destination = (destination or "").strip()
        if not destination:
            logger.info("Rejecting research request without a destination")
            yield ResearchEvent.error(DESTINATION_REQUIRED)
            return

        logger.info("Starting research for %s", destination)
        steps = research_steps()
        current = 0
        yield self._step_event(steps, current, "active")
        yield ResearchEvent.progress(PROGRESS_START)

        collected: Dict[str, Any] = {}
        total = len(self.tasks)
        for index, task in enumerate(self.tasks):
            if is_cancelled is not None and await is_cancelled():
                logger.info("Research for %s cancelled before %s", destination, task.tool_name)
                return

            if task.step_index > current:
                yield self._step_event(steps, current, "complete")
                current = task.step_index
                yield self._step_event(steps, current, "active")

            call = ToolCallInfo(tool_name=task.tool_name, start_time=_now_ms())
            yield ResearchEvent.tool_call(call)

            result = await self._run_task(task, destination, collected)
            if result.success and result.data is not None:
                collected[task.tool_name] = result.data
                logger.info("%s completed with data", task.tool_name)
            else:
                logger.info("%s returned no data: %s", task.tool_name, result.error)

            yield ResearchEvent.tool_call(
                call.model_copy(update={"end_time": _now_ms(), "status": "complete" if result.success else "error"})
            )
            yield ResearchEvent.progress(task_progress(index + 1, total))

            if self.step_delay_s > 0:
                await asyncio.sleep(self.step_delay_s)

        if is_cancelled is not None and await is_cancelled():
            logger.info("Research for %s cancelled before synthesis", destination)
            return

        for index in range(current, len(steps)):
            yield self._step_event(steps, index, "complete")
        yield ResearchEvent.progress(PROGRESS_SYNTHESIS)

        guide = self.synthesizer(destination, MappingProxyType(collected))
        if self.enricher is not None:
            guide = await self._enrich(guide)

        yield ResearchEvent.progress(PROGRESS_DONE)
        logger.info("Guide generated for %s from %d sources", destination, len(collected))
        yield ResearchEvent.complete(guide)

    async def _run_task(self, task: ResearchTask, destination: str, collected: Dict[str, Any]) -> ToolResult:
        try:
            args = task.build_args(destination, MappingProxyType(dict(collected)))
            logger.debug("Executing %s with %s", task.tool_name, args)
            return await self.registry.invoke(task.tool_name, args)
        except Exception as exc:
            logger.exception("Error executing %s", task.tool_name)
            return ToolResult.failed(str(exc))

    async def _enrich(self, guide: TravelGuide) -> TravelGuide:
        try:
            return await self.enricher.enrich(guide)
        except Exception:
            logger.warning("Summary enrichment failed, keeping original guide", exc_info=True)
            return guide

    @staticmethod
    def _step_event(steps: List[ResearchStep], index: int, status: str) -> ResearchEvent:
        steps[index] = steps[index].model_copy(update={"status": status})
        return ResearchEvent.step(steps[index], index)
