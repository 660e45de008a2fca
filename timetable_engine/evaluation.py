# timetable_engine/evaluation.py
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import numpy as np

from .catalog import SlotCatalog
from .engine import GenerationResult
from .model import TimeSlot, Weekday
from .timetable import WeeklyTimetable


@dataclass
class EvaluationResult:
    occupancy: np.ndarray          # [día][bloque] sesiones por celda
    venue_load: Dict[str, int]
    total_required: int
    total_assigned: int
    utilization: float
    shortfall: Dict[str, int]      # course_id -> sesiones faltantes
    violations: List[str]


def occupancy_matrix(timetable: WeeklyTimetable, catalog: SlotCatalog) -> np.ndarray:
    days = catalog.weekdays()
    n_slots = len(catalog.slots_for(days[0])) if days else 0
    occ = np.zeros((len(days), n_slots), dtype=int)
    for s in timetable.all_sessions():
        occ[catalog.day_index(s.weekday), catalog.slot_index(s.slot)] += 1
    return occ


def evaluate(result: GenerationResult, catalog: SlotCatalog) -> EvaluationResult:
    occ = occupancy_matrix(result.timetable, catalog)
    violations: List[str] = []

    for d, s in zip(*np.nonzero(occ > 1)):
        violations.append(f"Celda doble en día {catalog.weekdays()[d].short} bloque {s}")

    placed = Counter(s.course.course_id for s in result.timetable.all_sessions())
    shortfall: Dict[str, int] = {}
    for a in result.allocations:
        if not 0 <= a.assigned <= a.required:
            violations.append(f"{a.course.code}: asignadas {a.assigned} fuera de [0, {a.required}]")
        if placed.get(a.course.course_id, 0) != a.assigned:
            violations.append(f"{a.course.code}: la grilla no coincide con lo reportado")
        if a.shortfall > 0:
            shortfall[a.course.course_id] = a.shortfall

    venue_load = dict(Counter(s.venue for s in result.timetable.all_sessions()))
    capacity = catalog.capacity
    return EvaluationResult(
        occupancy=occ,
        venue_load=venue_load,
        total_required=result.total_required,
        total_assigned=result.total_assigned,
        utilization=float(occ.sum()) / capacity if capacity else 0.0,
        shortfall=shortfall,
        violations=violations,
    )


def venue_clashes(timetables: Iterable[WeeklyTimetable]) -> Dict[Tuple[Weekday, TimeSlot, str], int]:
    """(día, bloque, aula) reservados por más de un horario a la vez."""
    bookings: Counter = Counter()
    for tt in timetables:
        for s in tt.all_sessions():
            bookings[(s.weekday, s.slot, s.venue)] += 1
    return {k: n for k, n in bookings.items() if n > 1}
