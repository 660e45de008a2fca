import json
import tempfile
import unittest
from pathlib import Path

import pandas as pd

from timetable_engine.catalog import SlotCatalog, VenuePool
from timetable_engine.config import EngineConfig, load_config
from timetable_engine.data_loader import courses_from_dataframe, filter_courses, load_courses
from timetable_engine.engine import SchedulingEngine
from timetable_engine.errors import ConfigError, InputError
from timetable_engine.evaluation import evaluate
from timetable_engine.export import (
    BUSY_CELL_STYLE, FREE_CELL_STYLE, allocations_to_dataframe, cell_style, export_outputs, grid_dataframe,
    render_grid, timetable_to_dataframe,
)
from timetable_engine.model import CourseStatus, CourseType
from timetable_engine.policy import SessionPolicy


COURSES_CSV = """course_id,code,name,department,status,credits,course_type
C003,MA101,Calculus,Mathematics,active,4,regular
C001,CS101,Programming,Computer Science,active,3,lab
C002,CS210,Seminar,Computer Science,inactive,2,seminar
C004,PH210,Optics,Physics,active,,regular
C005,PH300,Mystery,Physics,active,2,lecture
"""


class ConfigTests(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        cfg = load_config("no/such/config.yaml")
        self.assertEqual(cfg.seed, 42)
        self.assertEqual(len(cfg.time_slots), 5)
        self.assertEqual(len(cfg.venues), 10)

    def test_yaml_overrides_known_keys(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("seed: 7\nvenue_strategy: exclusive\nunknown_key: 1\n", encoding="utf-8")
            cfg = load_config(str(path))
        self.assertEqual(cfg.seed, 7)
        self.assertEqual(cfg.venue_strategy, "exclusive")
        self.assertEqual(cfg.rest_day, "SUNDAY")

    def test_json_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"venues": ["X", "Y"]}), encoding="utf-8")
            cfg = load_config(str(path))
        self.assertEqual(cfg.venues, ["X", "Y"])

    def test_invalid_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(str(path))
        with self.assertRaises(ConfigError):
            EngineConfig(venue_strategy="nearest")
        with self.assertRaises(ConfigError):
            EngineConfig(venues=[])
        with self.assertRaises(ConfigError):
            EngineConfig(rest_day="Funday")

    def test_bad_time_slots(self):
        for slots in (["09:00"], ["09:00-25:00"], ["9h-10h"], ["10:30-09:00"], ["09:00-09:00"]):
            with self.assertRaises(ConfigError):
                EngineConfig(time_slots=slots)
        with self.assertRaises(ConfigError):
            EngineConfig(time_slots=["09:00-10:30", "11:00-12:00", "09:00-10:30"])

    def test_unknown_single_session_type(self):
        with self.assertRaises(ConfigError):
            EngineConfig(single_session_types=["lecture"])
        cfg = EngineConfig(single_session_types=["Seminar"])
        self.assertEqual(SessionPolicy.from_config(cfg).required_sessions(CourseType.SEMINAR, 4), 1)

    def test_bad_values_in_yaml(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("time_slots:\n  - '14:00-13:00'\n", encoding="utf-8")
            with self.assertRaises(ConfigError):
                load_config(str(path))


class LoaderTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "courses.csv"
        self.path.write_text(COURSES_CSV, encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_sorted_by_id(self):
        courses = load_courses(str(self.path))
        self.assertEqual([c.course_id for c in courses], ["C001", "C002", "C003", "C004", "C005"])
        lab = courses[0]
        self.assertEqual(lab.course_type, CourseType.LAB)
        self.assertEqual(lab.credits, 3)
        self.assertEqual(lab.name, "Programming")
        self.assertEqual(courses[1].status, CourseStatus.INACTIVE)

    def test_unreadable_fields_become_none(self):
        courses = {c.course_id: c for c in load_courses(str(self.path))}
        self.assertIsNone(courses["C004"].credits)
        self.assertIsNone(courses["C005"].course_type)

    def test_missing_column(self):
        with self.assertRaises(InputError):
            courses_from_dataframe(pd.DataFrame([{"course_id": "C1", "code": "X"}]))

    def test_filter_active_and_department(self):
        courses = load_courses(str(self.path))
        self.assertEqual([c.course_id for c in filter_courses(courses)], ["C001", "C003", "C004", "C005"])
        self.assertEqual(
            [c.course_id for c in filter_courses(courses, "computer science")], ["C001"]
        )
        self.assertEqual(filter_courses(courses, "History"), [])


class ExportTests(unittest.TestCase):
    def setUp(self):
        cfg = EngineConfig()
        self.catalog = SlotCatalog.from_config(cfg)
        self.engine = SchedulingEngine(self.catalog, VenuePool(cfg.venues))
        self.tmp = tempfile.TemporaryDirectory()
        path = Path(self.tmp.name) / "courses.csv"
        path.write_text(COURSES_CSV, encoding="utf-8")
        self.result = self.engine.generate(filter_courses(load_courses(str(path))), seed=4)

    def tearDown(self):
        self.tmp.cleanup()

    def test_evaluation_summary(self):
        ev = evaluate(self.result, self.catalog)
        self.assertEqual(ev.occupancy.shape, (6, 5))
        self.assertEqual(int(ev.occupancy.sum()), 5)
        self.assertEqual(ev.total_required, 5)
        self.assertAlmostEqual(ev.utilization, 5 / 30)
        self.assertEqual(sum(ev.venue_load.values()), 5)
        self.assertEqual(ev.shortfall, {})
        self.assertEqual(ev.violations, [])

    def test_dataframes(self):
        df = timetable_to_dataframe(self.result.timetable)
        self.assertEqual(len(df), 5)
        self.assertEqual(sorted(df["Curso"].unique()), ["CS101", "MA101"])

        alloc = allocations_to_dataframe(self.result.allocations)
        self.assertEqual(list(alloc["course_id"]), ["C001", "C003", "C004", "C005"])
        self.assertEqual(list(alloc["assigned"]), [2, 3, 0, 0])
        self.assertTrue(alloc.loc[alloc["course_id"] == "C004", "error"].iloc[0])

        grid = grid_dataframe(self.result.timetable, self.catalog)
        self.assertEqual(grid.shape, (5, 6))
        self.assertEqual(int((grid != "").sum().sum()), 5)

    def test_render_grid(self):
        text = render_grid(self.result.timetable, self.catalog)
        lines = text.splitlines()
        self.assertTrue(lines[0].startswith("Time/Day"))
        self.assertIn("Mon", lines[0])
        self.assertNotIn("Sun", lines[0])
        self.assertEqual(len(lines), 2 + 5)
        self.assertIn("CS101 (", text)

    def test_cell_style_free_is_neutral(self):
        grid = grid_dataframe(self.result.timetable, self.catalog)
        styles = {cell_style(v) for v in grid.to_numpy().ravel()}
        self.assertEqual(styles, {FREE_CELL_STYLE, BUSY_CELL_STYLE})
        self.assertEqual(cell_style(""), FREE_CELL_STYLE)
        self.assertNotIn("#ff4b4b", FREE_CELL_STYLE)

    def test_export_outputs(self):
        out = Path(self.tmp.name) / "out"
        export_outputs(self.result, out)
        self.assertTrue((out / "schedule.csv").exists())
        saved = pd.read_csv(out / "allocations.csv")
        self.assertEqual(len(saved), 4)


if __name__ == "__main__":
    unittest.main()
