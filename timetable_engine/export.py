"""
Salidas del horario: DataFrames, grilla de texto y CSV.
Nada de esto participa en la asignación.
"""
from pathlib import Path
from typing import List

import pandas as pd

from .catalog import SlotCatalog
from .engine import GenerationResult
from .model import CourseAllocation
from .timetable import WeeklyTimetable


def timetable_to_dataframe(timetable: WeeklyTimetable) -> pd.DataFrame:
    data = []
    for s in timetable.all_sessions():
        data.append(
            {
                "Dia": s.weekday.short,
                "Hora_Inicio": f"{s.slot.start:%H:%M}",
                "Hora_Fin": f"{s.slot.end:%H:%M}",
                "Curso": s.course.code,
                "Nombre": s.course.name,
                "Departamento": s.course.department,
                "Aula": s.venue,
            }
        )
    return pd.DataFrame(data, columns=["Dia", "Hora_Inicio", "Hora_Fin", "Curso", "Nombre", "Departamento", "Aula"])


def allocations_to_dataframe(allocations: List[CourseAllocation]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "course_id": a.course.course_id,
                "code": a.course.code,
                "required": a.required,
                "assigned": a.assigned,
                "shortfall": a.shortfall,
                "error": a.error or "",
            }
            for a in allocations
        ],
        columns=["course_id", "code", "required", "assigned", "shortfall", "error"],
    )


def grid_dataframe(timetable: WeeklyTimetable, catalog: SlotCatalog) -> pd.DataFrame:
    """Bloques como filas, días como columnas; celdas 'CODIGO (aula)'."""
    days = catalog.weekdays()
    index = [slot.label for slot in catalog.slots_for(days[0])] if days else []
    grid = pd.DataFrame("", index=index, columns=[d.short for d in days])
    for s in timetable.all_sessions():
        grid.at[s.slot.label, s.weekday.short] = f"{s.course.code} ({s.venue})"
    return grid


FREE_CELL_STYLE = "background-color: #f0f2f6"
BUSY_CELL_STYLE = "background-color: #e8f5e9; color: #000"


def cell_style(value: str) -> str:
    """Estilo CSS de una celda de `grid_dataframe`: libre en gris neutro."""
    return FREE_CELL_STYLE if value == "" else BUSY_CELL_STYLE


def render_grid(timetable: WeeklyTimetable, catalog: SlotCatalog) -> str:
    days = catalog.weekdays()
    lines = [f"{'Time/Day':<12}" + "".join(f"{d.short:<20}" for d in days), "-" * 140]
    for slot in catalog.slots_for(days[0]) if days else ():
        row = f"{slot.label:<12}"
        for day in days:
            session = timetable.session_at(day, slot)
            info = f"{session.course.code} ({session.venue})" if session else ""
            row += f"{info[:18]:<20}"
        lines.append(row)
    return "\n".join(lines)


def export_outputs(result: GenerationResult, out_dir: Path, prefix: str = "") -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    timetable_to_dataframe(result.timetable).to_csv(out_dir / f"{prefix}schedule.csv", index=False)
    allocations_to_dataframe(result.allocations).to_csv(out_dir / f"{prefix}allocations.csv", index=False)
