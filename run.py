import argparse
import logging
from pathlib import Path

from timetable_engine.catalog import SlotCatalog, VenuePool, build_venue_strategy
from timetable_engine.config import load_config
from timetable_engine.data_loader import filter_courses, load_courses
from timetable_engine.engine import GenerationResult, SchedulingEngine
from timetable_engine.evaluation import evaluate, venue_clashes
from timetable_engine.export import export_outputs, render_grid
from timetable_engine.policy import SessionPolicy


def build_engine(cfg) -> SchedulingEngine:
    catalog = SlotCatalog.from_config(cfg)
    pool = VenuePool(cfg.venues)
    return SchedulingEngine(
        catalog=catalog,
        venues=pool,
        policy=SessionPolicy.from_config(cfg),
        venue_strategy=build_venue_strategy(cfg, pool),
    )


def print_report(title: str, result: GenerationResult, catalog: SlotCatalog, semester: str = ""):
    print("\n=== TIMETABLE GENERATION ===")
    print(f"Department: {title}")
    if semester:
        print(f"Semester: {semester}")
    print("-" * 80)
    print(render_grid(result.timetable, catalog))

    eval_res = evaluate(result, catalog)
    print(
        f"\nSesiones: {eval_res.total_assigned}/{eval_res.total_required} "
        f"| Ocupación: {eval_res.utilization:.0%}"
    )
    for a in result.shortfalls:
        print(f"  FALTAN {a.shortfall} sesión(es) para {a.course.code} ({a.assigned}/{a.required})")
    for a in result.skipped:
        print(f"  OMITIDO {a.course.course_id}: {a.error}")
    for v in eval_res.violations:
        print(f"  VIOLACIÓN: {v}")


def main():
    parser = argparse.ArgumentParser(description="Generación del horario semanal de cursos")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--courses", default="data/courses.csv", help="CSV con los cursos")
    parser.add_argument("--department", default=None, help="Departamento a programar (ALL = todos)")
    parser.add_argument("--semester", default="", help="Semestre que se muestra en el encabezado del reporte")
    parser.add_argument("--seed", type=int, default=None, help="Semilla (por defecto la de la configuración)")
    parser.add_argument("--out", default="outputs", help="Directorio de salida")
    parser.add_argument("--by-department", action="store_true", help="Un horario independiente por departamento")
    parser.add_argument("--log-level", default="WARNING", help="Nivel de logging (DEBUG, INFO, ...)")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="[%(levelname)s] %(name)s: %(message)s")

    cfg = load_config(args.config)
    seed = cfg.seed if args.seed is None else args.seed
    department = args.department or cfg.department

    print("Cargando cursos...")
    courses = filter_courses(load_courses(args.courses), department)
    if not courses:
        print("No active courses found for the specified criteria.")
        return

    engine = build_engine(cfg)
    out_dir = Path(args.out)

    if args.by_department:
        results = engine.generate_by_department(courses, seed=seed)
        for dept, result in results.items():
            print_report(dept, result, engine.catalog, args.semester)
            export_outputs(result, out_dir, prefix=f"{dept}_")
        clashes = venue_clashes(r.timetable for r in results.values())
        if clashes:
            print(f"\nAulas reservadas por más de un departamento a la vez: {len(clashes)}")
    else:
        result = engine.generate(courses, seed=seed)
        print_report(department, result, engine.catalog, args.semester)
        export_outputs(result, out_dir)

    print(f"Se guardaron resultados en {out_dir}/")


if __name__ == "__main__":
    main()
