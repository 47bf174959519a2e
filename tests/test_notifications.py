"""Tests for the notification bridge, the broadcast channel and the tray.

Covers:
- HH:MM:SS formatting, sign, unbounded hours
- Render request contents and action buttons
- Bridge forwarding to renderer and broadcast topic
- Fire-and-forget broadcast: drops, no replay, failing subscribers
- Tray renderer menu actions and command dispatch
"""

from __future__ import annotations

import pytest

from smoketimer.notifications.bridge import (
    NotificationBridge,
    build_render_request,
    format_display,
    NOTIFICATION_ID,
    NOTIFICATION_TITLE,
)
from smoketimer.notifications.broadcast import (
    BroadcastChannel, BroadcastMessage, TIMER_TOPIC,
)
from smoketimer.notifications.tray import (
    TrayNotificationRenderer, dispatch_command, icon_kind_for,
    ICON_OVERTIME, ICON_PAUSED, ICON_RUNNING,
)
from smoketimer.timer.engine import TimerState
from smoketimer.timer.snapshot import (
    Snapshot, STATUS_PAUSED, STATUS_RUNNING, STATUS_OVERTIME,
)

from helpers import RecordingRenderer, SignalCollector, advance


# ═══════════════════════════════════════════════════════════════════════
#  FORMATTING
# ═══════════════════════════════════════════════════════════════════════


class TestFormatDisplay:
    def test_full_countdown(self):
        assert format_display(4_500_000, False) == "01:15:00"

    def test_overtime_has_minus_sign(self):
        assert format_display(61_000, True) == "-00:01:01"

    def test_zero(self):
        assert format_display(0, False) == "00:00:00"

    def test_zero_overtime(self):
        assert format_display(0, True) == "-00:00:00"

    def test_sub_second_truncates(self):
        assert format_display(1999, False) == "00:00:01"

    def test_hours_past_a_day_do_not_wrap(self):
        assert format_display(25 * 3600 * 1000, True) == "-25:00:00"

    def test_hours_past_99(self):
        assert format_display(123 * 3600 * 1000 + 4000, True) == "-123:00:04"


# ═══════════════════════════════════════════════════════════════════════
#  RENDER REQUESTS
# ═══════════════════════════════════════════════════════════════════════


class TestRenderRequest:
    def test_running_offers_pause_and_restart(self):
        snap = Snapshot(60_000, False, True, STATUS_RUNNING)
        req = build_render_request(snap, "00:01:00")
        assert [a.label for a in req.actions] == ["Pause", "Restart"]
        assert [a.command for a in req.actions] == ["pause", "restart"]

    def test_paused_offers_resume_and_restart(self):
        snap = Snapshot(60_000, False, False, STATUS_PAUSED)
        req = build_render_request(snap, "00:01:00")
        assert [a.label for a in req.actions] == ["Resume", "Restart"]
        assert req.actions[0].command == "start"

    def test_paused_overtime_offers_resume(self):
        snap = Snapshot(5000, True, False, STATUS_PAUSED)
        req = build_render_request(snap, "-00:00:05")
        assert req.actions[0].label == "Resume"

    def test_fields(self):
        snap = Snapshot(61_000, True, True, STATUS_OVERTIME)
        req = build_render_request(snap, "-00:01:01")
        assert req.notification_id == NOTIFICATION_ID
        assert req.title == NOTIFICATION_TITLE
        assert req.body == "-00:01:01 | Overtime..."
        assert req.ongoing is True


# ═══════════════════════════════════════════════════════════════════════
#  BRIDGE
# ═══════════════════════════════════════════════════════════════════════


class TestNotificationBridge:
    def test_initial_render_on_construction(self, engine):
        renderer = RecordingRenderer()
        NotificationBridge(engine, renderer, BroadcastChannel())
        assert len(renderer.requests) == 1
        assert renderer.last.body == "01:15:00 | Paused"
        assert renderer.last.actions[0].label == "Resume"

    def test_every_snapshot_rendered(self, engine, clock):
        renderer = RecordingRenderer()
        NotificationBridge(engine, renderer, BroadcastChannel())
        engine.start()
        advance(engine, clock, 3)
        # initial + start + 3 ticks
        assert len(renderer.requests) == 5
        assert renderer.last.body == "01:14:57 | Running..."
        assert renderer.last.actions[0].label == "Pause"

    def test_snapshot_published_with_formatted_string(self, engine, clock):
        channel = BroadcastChannel()
        c = SignalCollector()
        channel.subscribe(TIMER_TOPIC, c)
        NotificationBridge(engine, RecordingRenderer(), channel)

        engine.start()
        advance(engine, clock, 1)

        assert len(c) == 2
        msg = c.last
        assert isinstance(msg, BroadcastMessage)
        assert msg.topic == TIMER_TOPIC
        assert msg.formatted == "01:14:59"
        assert msg.snapshot == engine.get_snapshot()

    def test_overtime_formatting_through_bridge(self, short_engine, clock):
        renderer = RecordingRenderer()
        bridge = NotificationBridge(short_engine, renderer, BroadcastChannel())
        short_engine.start()
        advance(short_engine, clock, 5 + 61)
        assert bridge.last_formatted == "-00:01:01"
        assert renderer.last.body == "-00:01:01 | Overtime..."

    def test_finished_tick_is_unsigned_zero(self, short_engine, clock):
        renderer = RecordingRenderer()
        NotificationBridge(short_engine, renderer, BroadcastChannel())
        short_engine.start()
        advance(short_engine, clock, 5)
        assert renderer.last.body == "00:00:00 | Finished!"

    def test_no_subscribers_is_not_an_error(self, engine, clock):
        renderer = RecordingRenderer()
        NotificationBridge(engine, renderer, BroadcastChannel())
        engine.start()
        advance(engine, clock, 2)
        assert len(renderer.requests) == 4

    def test_detach_stops_forwarding(self, engine):
        renderer = RecordingRenderer()
        bridge = NotificationBridge(engine, renderer, BroadcastChannel())
        bridge.detach()
        engine.start()
        assert len(renderer.requests) == 1

    def test_rendered_before_tick_returns(self, engine, clock):
        """Observers see the snapshot synchronously within the tick."""
        renderer = RecordingRenderer()
        NotificationBridge(engine, renderer, BroadcastChannel())
        engine.start()
        before = len(renderer.requests)
        clock.advance(1000)
        engine._on_tick()
        assert len(renderer.requests) == before + 1


# ═══════════════════════════════════════════════════════════════════════
#  BROADCAST CHANNEL
# ═══════════════════════════════════════════════════════════════════════


class TestBroadcastChannel:
    def test_publish_without_subscribers_drops(self):
        channel = BroadcastChannel()
        assert channel.publish(TIMER_TOPIC, "hello") == 0

    def test_no_replay_on_subscribe(self):
        channel = BroadcastChannel()
        channel.publish(TIMER_TOPIC, "missed")
        c = SignalCollector()
        channel.subscribe(TIMER_TOPIC, c)
        assert len(c) == 0
        channel.publish(TIMER_TOPIC, "seen")
        assert c.items == ["seen"]

    def test_topics_are_isolated(self):
        channel = BroadcastChannel()
        c = SignalCollector()
        channel.subscribe("other.topic", c)
        channel.publish(TIMER_TOPIC, "x")
        assert len(c) == 0

    def test_unsubscribe(self):
        channel = BroadcastChannel()
        c = SignalCollector()
        sub = channel.subscribe(TIMER_TOPIC, c)
        assert channel.subscriber_count(TIMER_TOPIC) == 1
        channel.unsubscribe(sub)
        assert channel.subscriber_count(TIMER_TOPIC) == 0
        assert channel.publish(TIMER_TOPIC, "x") == 0
        assert len(c) == 0

    def test_unsubscribe_twice_is_harmless(self):
        channel = BroadcastChannel()
        sub = channel.subscribe(TIMER_TOPIC, SignalCollector())
        channel.unsubscribe(sub)
        channel.unsubscribe(sub)

    def test_failing_subscriber_does_not_block_others(self):
        channel = BroadcastChannel()

        def broken(_payload):
            raise RuntimeError("observer went away")

        c = SignalCollector()
        channel.subscribe(TIMER_TOPIC, broken)
        channel.subscribe(TIMER_TOPIC, c)
        assert channel.publish(TIMER_TOPIC, "x") == 1
        assert c.items == ["x"]

    def test_subscriber_may_unsubscribe_during_publish(self):
        channel = BroadcastChannel()
        holder = {}

        def once(payload):
            channel.unsubscribe(holder["sub"])

        holder["sub"] = channel.subscribe(TIMER_TOPIC, once)
        assert channel.publish(TIMER_TOPIC, "x") == 1
        assert channel.subscriber_count(TIMER_TOPIC) == 0


# ═══════════════════════════════════════════════════════════════════════
#  TRAY RENDERER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestTrayRenderer:
    def test_menu_actions_follow_request(self, engine):
        commands = []
        tray = TrayNotificationRenderer(commands.append)
        tray.render(build_render_request(engine.get_snapshot(), "01:15:00"))
        assert [a.text() for a in tray.action_items] == ["Resume", "Restart"]

        engine.start()
        tray.render(build_render_request(engine.get_snapshot(), "01:15:00"))
        assert [a.text() for a in tray.action_items] == ["Pause", "Restart"]

    def test_menu_action_dispatches_command(self, engine):
        commands = []
        tray = TrayNotificationRenderer(commands.append)
        tray.render(build_render_request(engine.get_snapshot(), "01:15:00"))
        tray.action_items[0].trigger()
        tray.action_items[1].trigger()
        assert commands == ["start", "restart"]

    def test_tooltip_carries_title_and_body(self, engine):
        tray = TrayNotificationRenderer(lambda c: None)
        tray.render(build_render_request(engine.get_snapshot(), "01:15:00"))
        assert NOTIFICATION_TITLE in tray.tooltip
        assert "01:15:00 | Paused" in tray.tooltip

    def test_icon_kind(self):
        running = build_render_request(Snapshot(1000, False, True, STATUS_RUNNING), "00:00:01")
        overtime = build_render_request(Snapshot(1000, True, True, STATUS_OVERTIME), "-00:00:01")
        paused = build_render_request(Snapshot(1000, True, False, STATUS_PAUSED), "-00:00:01")
        assert icon_kind_for(running) == ICON_RUNNING
        assert icon_kind_for(overtime) == ICON_OVERTIME
        assert icon_kind_for(paused) == ICON_PAUSED


class TestDispatchCommand:
    def test_start_pause_restart(self, engine):
        dispatch_command(engine, "start")
        assert engine.state == TimerState.RUNNING_COUNTDOWN
        dispatch_command(engine, "pause")
        assert engine.state == TimerState.STOPPED
        dispatch_command(engine, "restart")
        assert engine.state == TimerState.RUNNING_COUNTDOWN

    def test_unknown_command_ignored(self, engine):
        dispatch_command(engine, "explode")
        assert engine.state == TimerState.STOPPED
