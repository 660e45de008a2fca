# timetable_engine/policy.py
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .config import EngineConfig
from .model import CourseType


@dataclass(frozen=True)
class SessionPolicy:
    lab_cap: int = 2
    default_cap: int = 3
    single_session_types: FrozenSet[CourseType] = field(
        default_factory=lambda: frozenset({CourseType.SEMINAR, CourseType.WORKSHOP})
    )

    @classmethod
    def from_config(cls, cfg: EngineConfig) -> "SessionPolicy":
        return cls(
            lab_cap=int(cfg.lab_session_cap),
            default_cap=int(cfg.default_session_cap),
            single_session_types=frozenset(CourseType(str(t).strip().lower()) for t in cfg.single_session_types),
        )

    def required_sessions(self, course_type: CourseType, credits: Optional[int]) -> int:
        """
        Sesiones semanales según tipo y créditos:
        lab -> min(créditos, 2); seminario/taller -> 1; resto -> min(créditos, 3).
        Nunca negativo.
        """
        credits = int(credits or 0)
        if course_type in self.single_session_types:
            required = 1
        elif course_type == CourseType.LAB:
            required = min(credits, self.lab_cap)
        else:
            required = min(credits, self.default_cap)
        return max(0, required)


DEFAULT_POLICY = SessionPolicy()


def required_sessions(course_type: CourseType, credits: Optional[int]) -> int:
    return DEFAULT_POLICY.required_sessions(course_type, credits)
