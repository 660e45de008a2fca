# timetable_engine/data_loader.py
from typing import Iterable, List, Optional

import pandas as pd

from .errors import InputError
from .model import CourseDescriptor, CourseStatus, CourseType

REQUIRED_COLUMNS = ["course_id", "code", "department", "status", "credits", "course_type"]


def _parse_enum(enum_cls, raw):
    if pd.isna(raw):
        return None
    try:
        return enum_cls(str(raw).strip().lower())
    except ValueError:
        return None


def _parse_credits(raw) -> Optional[int]:
    if pd.isna(raw):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not value.is_integer():
        return None
    return int(value)


def courses_from_dataframe(df: pd.DataFrame) -> List[CourseDescriptor]:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise InputError(f"Faltan columnas en el CSV de cursos: {', '.join(missing)}")

    # Filas ilegibles quedan con None: el motor las marca y sigue.
    courses: List[CourseDescriptor] = []
    for _, row in df.iterrows():
        courses.append(
            CourseDescriptor(
                course_id=str(row["course_id"]).strip(),
                code=str(row["code"]).strip(),
                department=str(row["department"]).strip(),
                status=_parse_enum(CourseStatus, row["status"]) or CourseStatus.DRAFT,
                credits=_parse_credits(row["credits"]),
                course_type=_parse_enum(CourseType, row["course_type"]),
                name=str(row["name"]).strip() if "name" in df.columns and pd.notna(row["name"]) else "",
            )
        )
    courses.sort(key=lambda c: c.course_id)
    return courses


def load_courses(path: str) -> List[CourseDescriptor]:
    df = pd.read_csv(path, dtype={"course_id": str, "code": str, "department": str})
    return courses_from_dataframe(df)


def filter_courses(courses: Iterable[CourseDescriptor], department: str = "ALL") -> List[CourseDescriptor]:
    """Cursos activos del departamento pedido ("ALL" = todos), en el mismo orden."""
    dept = department.strip().lower()
    return [
        c for c in courses
        if c.status == CourseStatus.ACTIVE and (dept == "all" or c.department.lower() == dept)
    ]
