"""
Configuración del motor de horarios semanales.

Incluye un cargador desde YAML (o JSON) para dejar la grilla, las aulas,
la política de sesiones y la semilla reproducibles y configurables.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Any
import json

import yaml

from .errors import ConfigError
from .model import CourseType, TimeSlot


DEFAULT_TIME_SLOTS: List[str] = [
    "09:00-10:30",
    "10:45-12:15",
    "13:00-14:30",
    "14:45-16:15",
    "16:30-18:00",
]

DEFAULT_VENUES: List[str] = [
    "Room A101", "Room A102", "Room A103", "Room B101", "Room B102",
    "Lab L101", "Lab L102", "Auditorium Main", "Seminar Hall 1", "Seminar Hall 2",
]

VENUE_STRATEGIES = ("random", "exclusive")

_DAY_NAMES = {"MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"}


@dataclass
class EngineConfig:
    # Grilla
    rest_day: str = "SUNDAY"
    time_slots: List[str] = field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    venues: List[str] = field(default_factory=lambda: list(DEFAULT_VENUES))

    # Política de sesiones por semana
    lab_session_cap: int = 2
    default_session_cap: int = 3
    single_session_types: List[str] = field(default_factory=lambda: ["seminar", "workshop"])

    # Ejecución
    seed: int = 42
    venue_strategy: str = "random"
    department: str = "ALL"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def __post_init__(self):
        if not self.venues:
            raise ConfigError("venues no puede estar vacío")
        if not self.time_slots:
            raise ConfigError("time_slots no puede estar vacío")
        if self.venue_strategy not in VENUE_STRATEGIES:
            raise ConfigError(f"venue_strategy desconocida: {self.venue_strategy!r}")
        if str(self.rest_day).strip().upper() not in _DAY_NAMES:
            raise ConfigError(f"rest_day no es un día: {self.rest_day!r}")
        self._check_time_slots()
        for t in self.single_session_types:
            try:
                CourseType(str(t).strip().lower())
            except ValueError:
                raise ConfigError(f"single_session_types: tipo desconocido {t!r}") from None

    def _check_time_slots(self):
        seen = set()
        for txt in self.time_slots:
            try:
                slot = TimeSlot.parse(str(txt))
            except ValueError:
                raise ConfigError(f"time_slots: rango inválido {txt!r}") from None
            if slot.start >= slot.end:
                raise ConfigError(f"time_slots: {txt!r} termina antes de empezar")
            if slot in seen:
                raise ConfigError(f"time_slots: bloque repetido {txt!r}")
            seen.add(slot)


def _load_yaml_or_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text) or {}
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> EngineConfig:
    cfg_path = Path(path)
    data = _load_yaml_or_json(cfg_path)
    if not isinstance(data, dict):
        raise ConfigError("config.yaml debe contener un objeto mapeo")
    return EngineConfig.from_dict(data)
