import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vacation_calendar import VacationYamlRepository

with tempfile.TemporaryDirectory() as _import_dir, mock.patch.dict(os.environ, {"VACATIONS_DATA_DIR": _import_dir}):
    import vacation_mcp_server


class TestCheckVacationLimits(unittest.TestCase):
    def setUp(self) -> None:
        self._temp_dir = tempfile.TemporaryDirectory()
        repo = VacationYamlRepository(Path(self._temp_dir.name) / "data")
        patcher = mock.patch.object(vacation_mcp_server, "REPOSITORY", repo)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._temp_dir.cleanup)

    def test_malformed_expression_is_reported(self) -> None:
        reasons = vacation_mcp_server.check_vacation_limits("завтра по 16.08", "Иван")

        self.assertEqual(len(reasons), 1)
        self.assertIn("завтра", reasons[0])

    def test_huge_span_is_refused_without_expanding(self) -> None:
        with mock.patch.object(vacation_mcp_server, "check_limits") as check_limits:
            reasons = vacation_mcp_server.check_vacation_limits("01.01.0001 по 31.12.9999", "Иван")

        self.assertEqual(len(reasons), 1)
        self.assertIn("more than", reasons[0])
        check_limits.assert_not_called()

    def test_list_of_far_dates_reports_each_day(self) -> None:
        reasons = vacation_mcp_server.check_vacation_limits("01.01.2000 02.01.2000", "Иван")
        self.assertEqual(len(reasons), 2)


if __name__ == "__main__":
    unittest.main()
