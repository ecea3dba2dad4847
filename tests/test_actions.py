import subprocess
import unittest
from unittest import mock

from di_actions import SPAWN_FAILED, ActionRunner
from di_models import AwaitedEffect, DetachedEffect


class TestActionRunner(unittest.TestCase):
    def setUp(self):
        self.runner = ActionRunner()

    @mock.patch("di_actions.subprocess.Popen")
    def test_detached_spawn_is_not_awaited(self, popen):
        self.runner.run_detached(DetachedEffect(("sh", "-c", "echo hi"), "phase 1 command"))
        popen.assert_called_once_with(
            ["sh", "-c", "echo hi"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
        popen.return_value.wait.assert_not_called()

    @mock.patch("di_actions.subprocess.Popen", side_effect=FileNotFoundError("xdotool"))
    def test_detached_failure_is_dropped(self, popen):
        self.runner.run_detached(DetachedEffect(("xdotool", "windowclose", "1"), "window close"))
        popen.assert_called_once()

    @mock.patch("di_actions.subprocess.run")
    def test_awaited_waits_for_exit(self, run):
        run.return_value = subprocess.CompletedProcess(["systemctl", "poweroff"], 0)
        status = self.runner.run_awaited(AwaitedEffect(("systemctl", "poweroff"), "phase 2 command"))
        self.assertEqual(status, 0)
        run.assert_called_once_with(["systemctl", "poweroff"], check=False)

    @mock.patch("di_actions.subprocess.run")
    def test_awaited_disabled_is_success(self, run):
        self.assertEqual(self.runner.run_awaited(AwaitedEffect(None, "phase 2 command")), 0)
        run.assert_not_called()

    @mock.patch("di_actions.subprocess.run", side_effect=FileNotFoundError("systemctl"))
    def test_awaited_spawn_failure(self, run):
        status = self.runner.run_awaited(AwaitedEffect(("systemctl", "poweroff"), "phase 2 command"))
        self.assertEqual(status, SPAWN_FAILED)

    def test_dispatch_routes_by_kind(self):
        with mock.patch.object(self.runner, "run_detached") as detached, \
                mock.patch.object(self.runner, "run_awaited", return_value=3) as awaited:
            status = self.runner.dispatch(
                [
                    DetachedEffect(("a",), "window close"),
                    AwaitedEffect(("b",), "phase 2 command"),
                ]
            )
        self.assertEqual(status, 3)
        detached.assert_called_once_with(DetachedEffect(("a",), "window close"))
        awaited.assert_called_once_with(AwaitedEffect(("b",), "phase 2 command"))

    def test_dispatch_nothing(self):
        self.assertIsNone(self.runner.dispatch(()))


if __name__ == "__main__":
    unittest.main()
