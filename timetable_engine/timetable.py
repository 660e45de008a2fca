# timetable_engine/timetable.py
from typing import Dict, Iterator, List, Optional, Tuple

from .catalog import SlotCatalog
from .model import ScheduledSession, TimeSlot, Weekday


class WeeklyTimetable:
    """
    Grilla resultado: a lo sumo una sesión por celda (día, bloque).
    `try_occupy` es la única forma de escribir y nunca sobrescribe.
    """

    def __init__(self, catalog: SlotCatalog):
        self.catalog = catalog
        self._cells: Dict[Weekday, Dict[TimeSlot, ScheduledSession]] = {
            day: {} for day in catalog.weekdays()
        }

    def try_occupy(self, weekday: Weekday, slot: TimeSlot, session: ScheduledSession) -> bool:
        if slot not in self.catalog.slots_for(weekday):
            raise KeyError(f"Bloque {slot} fuera de la grilla")
        day_cells = self._cells[weekday]
        if slot in day_cells:
            return False
        day_cells[slot] = session
        return True

    def is_free(self, weekday: Weekday, slot: TimeSlot) -> bool:
        return self.session_at(weekday, slot) is None

    def session_at(self, weekday: Weekday, slot: TimeSlot) -> Optional[ScheduledSession]:
        return self._cells.get(weekday, {}).get(slot)

    def sessions_for_day(self, weekday: Weekday) -> List[Tuple[TimeSlot, ScheduledSession]]:
        day_cells = self._cells.get(weekday, {})
        return [(s, day_cells[s]) for s in self.catalog.slots_for(weekday) if s in day_cells]

    def all_sessions(self) -> List[ScheduledSession]:
        out: List[ScheduledSession] = []
        for day in self.catalog.weekdays():
            out.extend(session for _, session in self.sessions_for_day(day))
        return out

    def sessions_for_course(self, course_id: str) -> List[ScheduledSession]:
        return [s for s in self.all_sessions() if s.course.course_id == course_id]

    def free_cells(self) -> List[Tuple[Weekday, TimeSlot]]:
        return [
            (day, slot)
            for day in self.catalog.weekdays()
            for slot in self.catalog.slots_for(day)
            if slot not in self._cells[day]
        ]

    def __iter__(self) -> Iterator[ScheduledSession]:
        return iter(self.all_sessions())

    def __len__(self) -> int:
        return sum(len(cells) for cells in self._cells.values())
