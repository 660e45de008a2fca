# timetable_engine/model.py
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Optional


class Weekday(Enum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def short(self) -> str:
        return self.name[:3].capitalize()

    @classmethod
    def parse(cls, value) -> "Weekday":
        if isinstance(value, Weekday):
            return value
        return cls[str(value).strip().upper()]


class CourseType(Enum):
    REGULAR = "regular"
    ONLINE = "online"
    LAB = "lab"
    SEMINAR = "seminar"
    WORKSHOP = "workshop"
    INTERNSHIP = "internship"
    PROJECT = "project"
    THESIS = "thesis"


class CourseStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DRAFT = "draft"


@dataclass(frozen=True, order=True)
class TimeSlot:
    start: time
    end: time

    @classmethod
    def parse(cls, text: str) -> "TimeSlot":
        """'09:00-10:30' -> TimeSlot(09:00, 10:30)"""
        start_txt, end_txt = text.split("-")
        return cls(time.fromisoformat(start_txt.strip()), time.fromisoformat(end_txt.strip()))

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class CourseDescriptor:
    # Lo que llega del catálogo de cursos; el motor solo lo lee.
    course_id: str
    code: str
    department: str
    status: CourseStatus = CourseStatus.ACTIVE
    credits: Optional[int] = None
    course_type: Optional[CourseType] = CourseType.REGULAR
    name: str = ""


@dataclass(frozen=True)
class ScheduledSession:
    course: CourseDescriptor
    weekday: Weekday
    slot: TimeSlot
    venue: str


@dataclass(frozen=True)
class CourseAllocation:
    course: CourseDescriptor
    required: int
    assigned: int
    error: Optional[str] = None

    @property
    def shortfall(self) -> int:
        return self.required - self.assigned

    @property
    def skipped(self) -> bool:
        return self.error is not None
