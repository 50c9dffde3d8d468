"""Notification capacity, expiry, hover pause, actions and exit transitions."""

from __future__ import annotations

import pytest

from timewise.services.notification_center import NotificationAction, NotificationCenter


def test_post_shows_and_expires_after_default_ttl(center, presenter, scheduler):
    nid = center.info("Saved")
    assert presenter.visible_ids == [nid]
    note = center.get(nid)
    assert note.ttl_ms == 4000 and note.icon == "ℹ"
    scheduler.advance(3999)
    assert nid in center
    scheduler.advance(1)
    assert nid not in center
    assert presenter.removed == [nid]


def test_severity_defaults_differ(center):
    assert center.get(center.error("Broken")).ttl_ms == 8000
    assert center.get(center.warning("Careful")).ttl_ms == 6000
    assert center.get(center.success("Done", ttl_ms=1500)).ttl_ms == 1500


def test_unknown_severity_rejected(center):
    with pytest.raises(ValueError):
        center.post("Hmm", "critical")
    with pytest.raises(ValueError):
        center.post("Hmm", ttl_ms=-1)


def test_invalid_capacity_rejected(scheduler):
    with pytest.raises(ValueError):
        NotificationCenter(scheduler, max_live=0)


def test_sixth_post_evicts_oldest_non_persistent(center, presenter, events):
    ids = [center.info(f"n{i}") for i in range(5)]
    newest = center.info("n5")
    assert center.count() == 5
    assert ids[0] not in center
    assert [n.id for n in center.live()] == ids[1:] + [newest]
    evicted = [p for name, p in events if name == "notification_evicted"]
    assert len(evicted) == 1 and evicted[0]["id"] == ids[0]
    assert "capacity 5" in evicted[0]["reason"]
    assert presenter.removed == [ids[0]]


def test_persistent_entries_are_skipped_for_eviction(center):
    keep = center.error("Sticky", persistent=True)
    others = [center.info(f"n{i}") for i in range(5)]
    center.info("overflow")
    assert keep in center
    assert others[0] not in center
    assert center.get(keep).ttl_ms is None


def test_persistent_entries_do_not_count_toward_capacity(center, events):
    sticky = [center.error(f"s{i}", persistent=True) for i in range(3)]
    transient = [center.info(c) for c in "abc"]
    assert center.count() == 6
    assert center.transient_count() == 3
    assert all(nid in center for nid in sticky + transient)
    assert not [p for name, p in events if name == "notification_evicted"]
    more = [center.info(c) for c in "de"]
    assert center.transient_count() == 5 and transient[0] in center
    center.info("f")
    assert transient[0] not in center
    assert all(nid in center for nid in sticky + transient[1:] + more)
    assert center.transient_count() == 5


def test_all_persistent_allows_overflow(center):
    for i in range(5):
        center.info(f"p{i}", persistent=True)
    center.info("one more", persistent=True)
    assert center.count() == 6


def test_persistent_never_expires(center, scheduler):
    nid = center.warning("Stays", persistent=True)
    scheduler.advance(60_000)
    assert nid in center


def test_dismiss_without_sequencer_removes_immediately(center, presenter, events):
    nid = center.info("Bye")
    assert center.dismiss(nid) is True
    assert center.dismiss(nid) is False
    assert nid not in center
    assert presenter.removed == [nid]
    names = [n for n, _ in events]
    assert names == ["notification_posted", "notification_dismissed"]


def test_dismiss_all(center):
    for i in range(3):
        center.info(f"n{i}")
    assert center.dismiss_all() == 3
    assert center.count() == 0


def test_hover_pauses_and_resumes_expiry(center, scheduler):
    nid = center.info("Read me", ttl_ms=4000)
    scheduler.advance(1000)
    assert center.pause_expiry(nid) is True
    assert center.pause_expiry(nid) is False
    assert center.is_paused(nid)
    scheduler.advance(10_000)
    assert nid in center
    assert center.resume_expiry(nid) is True
    scheduler.advance(2999)
    assert nid in center
    scheduler.advance(1)
    assert nid not in center


def test_resume_grants_minimum_time(center, scheduler):
    nid = center.info("Almost gone", ttl_ms=1000)
    scheduler.advance(995)
    center.pause_expiry(nid)
    center.resume_expiry(nid)
    scheduler.advance(49)
    assert nid in center
    scheduler.advance(1)
    assert nid not in center


def test_action_runs_effect_then_dismisses(center):
    clicked = []
    nid = center.info("Undo?", actions=[NotificationAction("Undo", lambda: clicked.append(True))])
    assert center.invoke_action(nid, 0) is True
    assert clicked == [True]
    assert nid not in center
    assert center.invoke_action(nid, 0) is False


def test_failing_action_still_dismisses(center):
    def broken():
        raise RuntimeError("nope")

    nid = center.info("Retry", actions=[NotificationAction("Retry", broken)])
    center.invoke_action(nid, 0)
    assert nid not in center


def test_action_index_out_of_range(center):
    nid = center.info("No actions")
    with pytest.raises(IndexError):
        center.invoke_action(nid, 0)


def test_exit_transition_delays_removal(scheduler, elements, sequencer, presenter):
    center = NotificationCenter(scheduler, sequencer=sequencer, presenter=presenter)
    nid = center.info("Animated")
    element = elements.add(center.get(nid).element_id)
    scheduler.run_until_idle(limit_ms=350)
    center.dismiss(nid)
    assert nid in center and center.count() == 0
    assert presenter.removed == []
    scheduler.run_until_idle()
    assert nid not in center
    assert presenter.removed == [nid]
    assert element.get_property("opacity") == 0.0
    assert element.get_property("translate_x") == 100.0


def test_leaving_entry_frees_capacity(scheduler, elements, sequencer, presenter):
    center = NotificationCenter(scheduler, sequencer=sequencer, presenter=presenter, max_live=1)
    first = center.info("first")
    elements.add(center.get(first).element_id)
    center.dismiss(first)
    second = center.info("second")
    assert center.count() == 1
    assert first in center and second in center


def test_missing_toast_element_removes_at_once(scheduler, sequencer, presenter):
    center = NotificationCenter(scheduler, sequencer=sequencer, presenter=presenter)
    nid = center.info("No widget")
    center.dismiss(nid)
    assert nid not in center


def test_zero_ttl_expires_on_next_tick(center, scheduler, presenter):
    nid = center.info("Blink", ttl_ms=0)
    assert nid in center
    scheduler.advance(0)
    assert nid not in center
    assert presenter.removed == [nid]
