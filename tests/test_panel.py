"""
Command Interface and Preview Panel Tests

End-to-end through the LoopbackBridge: frames in, commands out, snapshots
read back.
"""

import pytest

from frames import console, eval_result, urlchange
from preview_panel.config import Config
from preview_panel.errors import PanelStateError
from preview_panel.panel import PreviewPanel
from preview_panel.schemas import PreviewFile, PreviewTree, default_tree


class TestCommands:

    def test_submit_command(self, panel, bridge):
        assert panel.commands.submit_command("1+1") is True

        entries = panel.logs.snapshot()
        assert [(e.method, e.data) for e in entries] == [("command", ("1+1",))]
        assert bridge.dispatched == [{"type": "evaluate", "command": "1+1"}]

    def test_submit_uses_and_clears_input_buffer(self, panel, bridge):
        panel.commands.set_input("  document.title ")
        panel.commands.submit_command()
        assert bridge.dispatched == [{"type": "evaluate", "command": "  document.title "}]
        assert panel.commands.input_buffer == ""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_is_ignored(self, panel, bridge, text):
        assert panel.commands.submit_command(text) is False
        assert bridge.dispatched == []
        assert len(panel.logs) == 0

    def test_request_clear(self, panel, bridge):
        bridge.emit(console("log", "a"))
        panel.commands.request_clear()
        assert panel.snapshot()["logs"] == []

    def test_toggle_console(self, panel):
        assert panel.snapshot()["show_console"] is True
        assert panel.commands.request_toggle_console() is False
        assert panel.snapshot()["show_console"] is False
        panel.commands.request_toggle_console()
        assert panel.snapshot()["show_console"] is True

    def test_refresh_dispatches_without_local_change(self, panel, bridge):
        bridge.emit(urlchange("https://app.test/a"))
        before = panel.snapshot()
        panel.commands.request_refresh()
        assert bridge.dispatched == [{"type": "refresh"}]
        assert panel.snapshot() == before

    def test_open_in_codesandbox_before_any_tree(self, panel):
        opened = []
        assert panel.commands.request_open_in_codesandbox(opened.append) is None
        assert opened == []

    def test_open_in_codesandbox_follows_current_tree(self, panel, bridge):
        opened = []
        panel.update(default_tree())
        url = panel.commands.request_open_in_codesandbox(opened.append)
        assert url.startswith("https://codesandbox.io/s/")
        assert opened == [url]
        assert bridge.dispatched == []

        panel.update(PreviewTree(files={"/index.js": PreviewFile(code="console.log(1)")}))
        assert panel.commands.request_open_in_codesandbox() != url

    def test_string_eval_results_are_kept_verbatim(self, panel, bridge):
        bridge.emit(eval_result("hello"))
        bridge.emit(eval_result("42"))
        entries = panel.snapshot()["logs"]
        assert [(e.method, e.data) for e in entries] == [("result", ("hello",)), ("result", ("42",))]

    def test_back_and_forward_dispatch(self, panel, bridge):
        for url in ["A", "B"]:
            bridge.emit(urlchange(url))

        assert panel.commands.go_back() is True
        assert panel.commands.go_back() is False
        assert panel.commands.go_forward() is True
        assert bridge.dispatched == [{"type": "urlback"}, {"type": "urlforward"}]

    def test_empty_history_dispatches_nothing(self, panel, bridge):
        assert panel.commands.go_back() is False
        assert panel.commands.go_forward() is False
        assert bridge.dispatched == []


class TestScenarios:

    def test_back_then_new_page(self, panel, bridge):
        for url in ["A", "B", "C"]:
            bridge.emit(urlchange(url))
        panel.commands.request_go(-1)
        bridge.emit(urlchange("D"))

        snapshot = panel.snapshot()
        assert snapshot["locations"] == ["A", "B", "D"]
        assert snapshot["current_index"] == 2

    def test_console_session(self, panel, bridge):
        panel.commands.submit_command("1+1")
        bridge.emit(eval_result(2))
        panel.commands.submit_command("missing()")
        bridge.emit(eval_result({"message": "missing is not defined"}, error=True))

        methods = [e.method for e in panel.snapshot()["logs"]]
        assert methods == ["command", "result", "command", "error"]

    def test_unconfirmed_back_is_rolled_back_on_snapshot(self, panel, bridge, clock):
        for url in ["https://app.test/", "https://app.test/about"]:
            bridge.emit(urlchange(url))

        panel.commands.go_back()
        assert panel.snapshot()["current_index"] == 0

        clock.advance(6)
        snapshot = panel.snapshot()
        assert snapshot["current_index"] == 1
        assert snapshot["location_path"] == "/about"


class TestSnapshot:

    def test_initial_snapshot(self, panel):
        snapshot = panel.snapshot()
        assert snapshot["locations"] == []
        assert snapshot["current_index"] == -1
        assert snapshot["current_location"] == "https://codesandbox.io/"
        assert snapshot["location_path"] == "/"
        assert snapshot["can_go_back"] is False
        assert snapshot["can_go_forward"] is False
        assert snapshot["evicted_logs"] == 0

    def test_snapshot_detached_from_later_events(self, panel, bridge):
        bridge.emit(urlchange("A"))
        snapshot = panel.snapshot()
        bridge.emit(urlchange("B"))
        bridge.emit(console("log", 1))
        assert snapshot["locations"] == ["A"]
        assert snapshot["logs"] == []

    def test_capacity_from_config(self, bridge, preview_env):
        preview_env.setenv("PREVIEW_LOG_CAPACITY", "2")
        panel = PreviewPanel(bridge, config=Config())
        with panel.mounted():
            for i in range(4):
                bridge.emit(console("log", i))
        snapshot = panel.snapshot()
        assert [e.data[0] for e in snapshot["logs"]] == [2, 3]
        assert snapshot["evicted_logs"] == 2


class TestLifecycle:

    def test_mounted_releases_subscription(self, bridge, config):
        panel = PreviewPanel(bridge, config=config)
        with panel.mounted():
            assert panel.is_mounted
            assert bridge.subscriber_count == 1
        assert not panel.is_mounted
        assert bridge.subscriber_count == 0

    def test_mounted_releases_on_error(self, bridge, config):
        panel = PreviewPanel(bridge, config=config)
        with pytest.raises(KeyError):
            with panel.mounted():
                raise KeyError("render failed")
        assert bridge.subscriber_count == 0

    def test_unmount_is_idempotent(self, bridge, config):
        panel = PreviewPanel(bridge, config=config)
        panel.mount()
        panel.unmount()
        panel.unmount()
        assert bridge.subscriber_count == 0

    def test_double_mount_rejected(self, panel):
        with pytest.raises(PanelStateError):
            panel.mount()

    def test_events_ignored_before_mount(self, bridge, config):
        panel = PreviewPanel(bridge, config=config)
        bridge.emit(urlchange("A"))
        assert panel.snapshot()["locations"] == []


class TestUpdate:

    def test_update_clears_console_and_pushes_tree(self, panel, bridge):
        bridge.emit(console("log", "old output"))
        tree = PreviewTree(
            files={"/index.js": PreviewFile(code="console.log('hi')")},
            dependencies={"react": "18.2.0"},
            show_open_in_codesandbox=True,
        )
        panel.update(tree)

        assert len(panel.logs) == 0
        assert bridge.trees == [{
            "files": {"/index.js": {"code": "console.log('hi')"}},
            "dependencies": {"react": "18.2.0"},
            "entry": "/index.js",
            "showOpenInCodeSandbox": False,
        }]

    def test_update_accepts_plain_dict(self, panel, bridge):
        panel.update({"files": {"/app.js": {"code": ""}}, "entry": "/app.js", "showOpenInCodeSandbox": True})
        pushed = bridge.trees[0]
        assert pushed["entry"] == "/app.js"
        assert pushed["showOpenInCodeSandbox"] is False

    def test_default_tree(self):
        tree = default_tree().to_wire()
        assert tree["files"] == {"/index.js": {"code": ""}}
        assert tree["dependencies"] == {}
        assert tree["entry"] == "/index.js"
