import logging
import random
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .catalog import RandomVenueStrategy, SlotCatalog, VenuePool
from .errors import InputError
from .model import CourseAllocation, CourseDescriptor, CourseType, ScheduledSession
from .policy import DEFAULT_POLICY, SessionPolicy
from .timetable import WeeklyTimetable

logger = logging.getLogger(__name__)


def validate_course(course: CourseDescriptor) -> None:
    if not isinstance(course.course_type, CourseType):
        raise InputError(f"{course.course_id}: tipo de curso inválido ({course.course_type!r})")
    if isinstance(course.credits, bool) or not isinstance(course.credits, int):
        raise InputError(f"{course.course_id}: créditos inválidos ({course.credits!r})")


@dataclass
class GenerationResult:
    timetable: WeeklyTimetable
    allocations: List[CourseAllocation] = field(default_factory=list)

    @property
    def shortfalls(self) -> List[CourseAllocation]:
        return [a for a in self.allocations if not a.skipped and a.shortfall > 0]

    @property
    def skipped(self) -> List[CourseAllocation]:
        return [a for a in self.allocations if a.skipped]

    @property
    def total_required(self) -> int:
        return sum(a.required for a in self.allocations)

    @property
    def total_assigned(self) -> int:
        return sum(a.assigned for a in self.allocations)

    def allocation_for(self, course_id: str) -> Optional[CourseAllocation]:
        for a in self.allocations:
            if a.course.course_id == course_id:
                return a
        return None


class GreedyPlacement:
    """
    Una sola pasada, sin retroceso: días barajados, luego bloques barajados
    de cada día, y se toma cada celda libre hasta cubrir lo requerido.
    """

    def place(
        self,
        course: CourseDescriptor,
        required: int,
        timetable: WeeklyTimetable,
        venue_strategy,
        rng: random.Random,
    ) -> int:
        catalog = timetable.catalog
        assigned = 0

        days = list(catalog.weekdays())
        rng.shuffle(days)
        for day in days:
            if assigned >= required:
                break
            slots = list(catalog.slots_for(day))
            rng.shuffle(slots)
            for slot in slots:
                if assigned >= required:
                    break
                venue = venue_strategy.pick(day, slot, rng)
                if venue is None:
                    continue
                session = ScheduledSession(course=course, weekday=day, slot=slot, venue=venue)
                if timetable.try_occupy(day, slot, session):
                    venue_strategy.confirm(day, slot, venue)
                    assigned += 1
                    logger.debug("%s -> %s %s (%s)", course.code, day.short, slot, venue)
        return assigned


class SchedulingEngine:
    def __init__(
        self,
        catalog: SlotCatalog,
        venues: VenuePool,
        policy: SessionPolicy = DEFAULT_POLICY,
        venue_strategy=None,
        placement=None,
    ):
        self.catalog = catalog
        self.venues = venues
        self.policy = policy
        self.venue_strategy = venue_strategy or RandomVenueStrategy(venues)
        self.placement = placement or GreedyPlacement()

    def generate(
        self,
        courses: Sequence[CourseDescriptor],
        seed: Optional[int] = None,
        venue_strategy=None,
    ) -> GenerationResult:
        """
        Arma el horario en el orden recibido. El orden es parte del contrato:
        con capacidad escasa, los últimos cursos son los que quedan sin bloques.

        Cada llamada arranca sin reservas de aula; para acumularlas entre
        llamadas hay que pasar la misma `venue_strategy` explícitamente.
        """
        strategy = venue_strategy or self.venue_strategy.fresh()
        return self._run(courses, random.Random(seed), strategy)

    def generate_by_department(
        self,
        courses: Sequence[CourseDescriptor],
        seed: Optional[int] = None,
        venue_strategy=None,
    ) -> Dict[str, GenerationResult]:
        groups: "OrderedDict[str, List[CourseDescriptor]]" = OrderedDict()
        for course in courses:
            groups.setdefault(course.department, []).append(course)

        # Los departamentos de esta llamada comparten las reservas de aula.
        strategy = venue_strategy or self.venue_strategy.fresh()
        results: Dict[str, GenerationResult] = {}
        for department, group in groups.items():
            rng = random.Random(None if seed is None else f"{seed}:{department}")
            logger.info("Departamento %s: %d cursos", department, len(group))
            results[department] = self._run(group, rng, strategy)
        return results

    def _run(self, courses: Sequence[CourseDescriptor], rng: random.Random, venue_strategy) -> GenerationResult:
        result = GenerationResult(timetable=WeeklyTimetable(self.catalog))

        for course in courses:
            try:
                validate_course(course)
            except InputError as exc:
                logger.warning("Curso omitido: %s", exc)
                result.allocations.append(CourseAllocation(course, required=0, assigned=0, error=str(exc)))
                continue

            required = self.policy.required_sessions(course.course_type, course.credits)
            assigned = 0
            if required > 0:
                assigned = self.placement.place(course, required, result.timetable, venue_strategy, rng)
            if assigned < required:
                logger.warning("%s: %d de %d sesiones asignadas", course.code, assigned, required)
            result.allocations.append(CourseAllocation(course, required=required, assigned=assigned))

        logger.info(
            "Horario generado para %d cursos: %d/%d sesiones",
            len(result.allocations), result.total_assigned, result.total_required,
        )
        return result
