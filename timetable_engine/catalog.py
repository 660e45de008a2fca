# timetable_engine/catalog.py
import random
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .config import EngineConfig
from .model import TimeSlot, Weekday


class SlotCatalog:
    """
    Grilla fija de la semana: días programables (todos menos el día de
    descanso) y los mismos bloques horarios, en orden, para cada día.
    """

    def __init__(self, slots: Sequence[TimeSlot], rest_day: Weekday = Weekday.SUNDAY):
        self._weekdays: Tuple[Weekday, ...] = tuple(d for d in Weekday if d != rest_day)
        self._slots: Tuple[TimeSlot, ...] = tuple(slots)
        self._slot_index: Dict[TimeSlot, int] = {s: i for i, s in enumerate(self._slots)}
        self.rest_day = rest_day

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> "SlotCatalog":
        return cls(
            slots=[TimeSlot.parse(txt) for txt in cfg.time_slots],
            rest_day=Weekday.parse(cfg.rest_day),
        )

    def weekdays(self) -> Tuple[Weekday, ...]:
        return self._weekdays

    def slots_for(self, weekday: Weekday) -> Tuple[TimeSlot, ...]:
        if weekday not in self._weekdays:
            raise KeyError(f"{weekday.name} no es un día programable")
        return self._slots

    def slot_index(self, slot: TimeSlot) -> int:
        return self._slot_index[slot]

    def day_index(self, weekday: Weekday) -> int:
        return self._weekdays.index(weekday)

    @property
    def capacity(self) -> int:
        return len(self._weekdays) * len(self._slots)


class VenuePool:
    def __init__(self, venues: Sequence[str]):
        self._venues: Tuple[str, ...] = tuple(venues)

    def venues(self) -> Tuple[str, ...]:
        return self._venues

    def pick_random(self, rng: random.Random) -> str:
        return rng.choice(self._venues)

    def __len__(self) -> int:
        return len(self._venues)


class RandomVenueStrategy:
    """Aula al azar por sesión, sin control de choques de aula."""

    def __init__(self, pool: VenuePool):
        self.pool = pool

    def pick(self, weekday: Weekday, slot: TimeSlot, rng: random.Random) -> Optional[str]:
        return self.pool.pick_random(rng)

    def confirm(self, weekday: Weekday, slot: TimeSlot, venue: str) -> None:
        pass

    def fresh(self) -> "RandomVenueStrategy":
        return self


class ExclusiveVenueStrategy:
    """
    Variante estricta: un aula no puede reservarse dos veces en el mismo
    (día, bloque). Las reservas viven mientras viva la instancia; el motor
    arranca cada corrida con `fresh()` salvo que reciba una instancia
    explícita para compartirla.
    """

    def __init__(self, pool: VenuePool):
        self.pool = pool
        self._booked: Dict[Tuple[Weekday, TimeSlot], Set[str]] = {}

    def pick(self, weekday: Weekday, slot: TimeSlot, rng: random.Random) -> Optional[str]:
        taken = self._booked.get((weekday, slot), set())
        free: List[str] = [v for v in self.pool.venues() if v not in taken]
        if not free:
            return None
        return rng.choice(free)

    def confirm(self, weekday: Weekday, slot: TimeSlot, venue: str) -> None:
        self._booked.setdefault((weekday, slot), set()).add(venue)

    def fresh(self) -> "ExclusiveVenueStrategy":
        return ExclusiveVenueStrategy(self.pool)

    def booked(self, weekday: Weekday, slot: TimeSlot) -> Set[str]:
        return set(self._booked.get((weekday, slot), set()))


def build_venue_strategy(cfg: EngineConfig, pool: VenuePool):
    if cfg.venue_strategy == "exclusive":
        return ExclusiveVenueStrategy(pool)
    return RandomVenueStrategy(pool)
