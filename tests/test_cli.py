"""
Tests for CLI entry points.

These tests focus on:
- basic CLI argument validation (search requires text, schedule commands
  require --group)
- printing lessons for a date
- reporting client errors on stderr with a nonzero exit code
- writing the cache snapshot to a temporary file (to avoid touching the
  real snapshot during tests)
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from ttschedule.cli import main
from ttschedule.errors import AuthError
from ttschedule.model import Faculty, FullScheduleSlot, Period, RecurringDay, ScheduleEntry, Teacher, Time
from ttschedule.schedule import Schedule


def _schedule() -> Schedule:
    monday = RecurringDay(
        weekday="Понедельник",
        slots=(
            FullScheduleSlot(
                1,
                Time(8, 20),
                Time(9, 40),
                (ScheduleEntry(subject="Математика", room="Б-203", type="лк", teacher=Teacher(name="Иванов И.И.")),),
            ),
        ),
    )
    return Schedule(42, {Period.FALL_SEMESTER: [monday]})


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.cache_file = Path(self.tmp.name) / "cache.json"
        patcher = mock.patch("ttschedule.cli.TtClient")
        self.client_cls = patcher.start()
        self.client = self.client_cls.return_value
        self.client.export_cache.return_value = {}
        self.addCleanup(patcher.stop)
        self.addCleanup(self.tmp.cleanup)

    def _run(self, *argv):
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            with self.assertRaises(SystemExit) as ctx:
                main(["--cache-file", str(self.cache_file), *argv])
        return ctx.exception.code, out.getvalue(), err.getvalue()

    def test_cli_search_requires_text(self) -> None:
        # search without text should exit with nonzero
        code, out, _ = self._run("search", "")
        self.assertNotEqual(code, 0)
        self.client.search_group.assert_not_called()

    def test_schedule_command_requires_group(self) -> None:
        code, out, _ = self._run("today")
        self.assertNotEqual(code, 0)
        self.assertIn("--group", out)

    def test_faculties(self) -> None:
        self.client.get_faculties.return_value = [Faculty(id=5, name="Факультет информатики")]
        code, out, _ = self._run("faculties")
        self.assertEqual(code, 0)
        self.assertIn("[5] Факультет информатики", out)
        self.client.login_as_guest.assert_not_called()
        self.assertTrue(self.client_cls.call_args[1]["auto_guest_login"])

    def test_date_prints_lessons(self) -> None:
        self.client.load_schedule.return_value = _schedule()
        code, out, _ = self._run("date", "2025-09-08", "--group", "42")
        self.assertEqual(code, 0)
        self.assertIn("Понедельник, 08.09.2025", out)
        self.assertIn("08:20-09:40", out)
        self.assertIn("Математика", out)
        self.assertEqual(self.client.load_schedule.call_args[0][0], 42)

    def test_date_without_lessons(self) -> None:
        self.client.load_schedule.return_value = _schedule()
        code, out, _ = self._run("date", "2025-09-09", "--group", "42", "--no-holidays")
        self.assertEqual(code, 0)
        self.assertIn("No lessons.", out)
        self.assertEqual(self.client.load_schedule.call_args[1]["holidays"], [])

    def test_invalid_date(self) -> None:
        self.client.load_schedule.return_value = _schedule()
        code, out, _ = self._run("date", "08.09.2025", "--group", "42")
        self.assertEqual(code, 1)
        self.assertIn("Invalid date", out)

    def test_client_error_reported_on_stderr(self) -> None:
        self.client.get_faculties.side_effect = AuthError("guest login failed (HTTP 200)")
        code, _, err = self._run("faculties")
        self.assertEqual(code, 1)
        self.assertIn("Error: guest login failed", err)

    def test_cache_snapshot_saved(self) -> None:
        self.client.get_faculties.return_value = []
        self.client.export_cache.return_value = {"faculties:all": {"data": [], "timestamp": 1}}
        self._run("faculties")
        saved = json.loads(self.cache_file.read_text(encoding="utf-8"))
        self.assertEqual(saved, {"faculties:all": {"data": [], "timestamp": 1}})
        self.client.import_cache.assert_called_once_with({})

    def test_today_uses_schedule(self) -> None:
        schedule = mock.Mock()
        schedule.today.return_value = []
        self.client.load_schedule.return_value = schedule
        code, out, _ = self._run("today", "-g", "42", "-s", "2")
        self.assertEqual(code, 0)
        schedule.today.assert_called_once_with(subgroup=2)
        self.assertIn("No lessons.", out)


if __name__ == "__main__":
    unittest.main()
