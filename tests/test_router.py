"""
Event Router Tests

INVARIANTS:
===========
- Events are applied strictly in arrival order
- Unknown or malformed frames never reach the state and never raise
- One subscription per router; release happens once
"""

import pytest

from frames import console, eval_result, urlchange
from preview_panel.console import NOISE_MESSAGE, UNDECODABLE, LogStore
from preview_panel.errors import PanelStateError
from preview_panel.navigation import NavigationStack
from preview_panel.router import EventRouter, Subscription
from preview_panel.schemas import DecodeFailure, UrlChangeEvent, parse_inbound_event


@pytest.fixture
def router():
    return EventRouter(NavigationStack(), LogStore())


@pytest.fixture
def connected(router, bridge):
    subscription = router.connect(bridge)
    yield router
    subscription.close()


class TestParseInboundEvent:

    def test_known_tags(self):
        assert isinstance(parse_inbound_event(urlchange("A")), UrlChangeEvent)

    def test_extra_keys_ignored(self):
        event = parse_inbound_event({"type": "urlchange", "url": "A", "codesandbox": True})
        assert event.url == "A"

    @pytest.mark.parametrize("raw", [
        {"type": "compile"},
        {"type": "urlchange"},
        {"type": "urlchange", "url": 42},
        {"url": "A"},
        "urlchange",
        None,
    ])
    def test_malformed_frames_are_failures(self, raw):
        assert isinstance(parse_inbound_event(raw), DecodeFailure)

    def test_failure_records_tag(self):
        assert parse_inbound_event({"type": "compile"}).tag == "compile"


class TestRouting:

    def test_urlchange_updates_navigation(self, connected, bridge):
        bridge.emit(urlchange("A"))
        bridge.emit(urlchange("B"))
        assert connected.navigation.locations == ["A", "B"]

    def test_eval_result_success_and_error(self, connected, bridge):
        bridge.emit(eval_result(2))
        bridge.emit(eval_result({"message": "boom"}, error=True))
        entries = connected.logs.snapshot()
        assert [(e.method, e.data) for e in entries] == [
            ("result", (2,)),
            ("error", ({"message": "boom"},)),
        ]

    def test_undecodable_eval_result_is_placeholder(self, connected, bridge):
        bridge.emit({"type": "eval-result", "result": b"{oops", "error": False})
        assert connected.logs.snapshot()[0].data == (UNDECODABLE,)

    def test_string_results_stay_strings(self, connected, bridge):
        bridge.emit(eval_result("hello"))
        bridge.emit(eval_result("42"))
        assert [e.data for e in connected.logs.snapshot()] == [("hello",), ("42",)]

    def test_console_call_appends(self, connected, bridge):
        bridge.emit(console("warn", "low disk", 5))
        entry = connected.logs.snapshot()[0]
        assert entry.method == "warn"
        assert entry.data == ("low disk", 5)

    def test_console_clear_empties_store(self, connected, bridge):
        bridge.emit(console("log", 1))
        bridge.emit(console("log", 2))
        bridge.emit(console("clear"))
        assert len(connected.logs) == 0

    def test_noise_message_dropped(self, connected, bridge):
        bridge.emit(console("error", NOISE_MESSAGE))
        assert len(connected.logs) == 0

    def test_unknown_and_malformed_frames_ignored(self, connected, bridge):
        bridge.emit({"type": "compile", "status": "done"})
        bridge.emit({"type": "console"})
        bridge.emit(42)
        bridge.emit(urlchange("A"))
        assert connected.navigation.locations == ["A"]
        assert len(connected.logs) == 0

    def test_events_applied_in_arrival_order(self, connected, bridge):
        frames = [console("log", i) for i in range(20)]
        frames.insert(10, console("clear"))
        for frame in frames:
            bridge.emit(frame)
        assert [e.data[0] for e in connected.logs.snapshot()] == list(range(10, 20))

    def test_handler_failure_does_not_stop_stream(self, connected, bridge, monkeypatch):
        calls = []
        original = connected.navigation.apply_url_change

        def flaky(url):
            calls.append(url)
            if url == "bad":
                raise RuntimeError("boom")
            return original(url)

        monkeypatch.setattr(connected.navigation, "apply_url_change", flaky)
        bridge.emit(urlchange("bad"))
        bridge.emit(urlchange("good"))
        assert calls == ["bad", "good"]
        assert connected.navigation.locations == ["good"]


class TestSubscription:

    def test_connect_subscribes_once(self, router, bridge):
        router.connect(bridge)
        assert bridge.subscriber_count == 1
        with pytest.raises(PanelStateError):
            router.connect(bridge)

    def test_close_is_idempotent(self, router, bridge):
        subscription = router.connect(bridge)
        subscription.close()
        subscription.close()
        assert subscription.closed
        assert bridge.subscriber_count == 0

    def test_unsubscribe_called_exactly_once(self):
        calls = []
        subscription = Subscription(lambda: calls.append(1))
        subscription.close()
        subscription.close()
        assert calls == [1]

    def test_closed_router_cannot_reconnect(self, router, bridge):
        router.connect(bridge).close()
        with pytest.raises(PanelStateError):
            router.connect(bridge)

    def test_context_manager_releases_on_error(self, router, bridge):
        with pytest.raises(RuntimeError):
            with router.connect(bridge):
                raise RuntimeError("panel crashed")
        assert bridge.subscriber_count == 0

    def test_events_after_close_are_ignored(self, router, bridge):
        handlers = []
        original_subscribe = bridge.subscribe

        def capture(handler):
            handlers.append(handler)
            return original_subscribe(handler)

        bridge.subscribe = capture
        router.connect(bridge).close()
        handlers[0](urlchange("A"))
        assert router.navigation.locations == []
