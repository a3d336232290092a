# Area: Core Tests
"""Tests for the participant registry."""

import pytest
from unittest.mock import Mock
from circle_royale._core.geometry import Point3
from circle_royale._core.registry import (
    FLAG_ALIVE,
    FLAG_BANDAGES,
    FLAG_IDENTIFIER,
    SPECTATOR_ATTACH_EVENT,
    SPECTATOR_DETACH_EVENT,
    SPECTATOR_MODE_EVENT,
    ParticipantRegistry,
    resolve_identifier,
)
from circle_royale._core.scheduler import ManualClock
from circle_royale.config import EventConfig
from circle_royale.simulated import SimulatedActor, SimulatedPresence


def make_registry(actor_count=2, listener=None, **config):
    presence = SimulatedPresence()
    presence.spawn(actor_count)
    clock = ManualClock(100.0)
    registry = ParticipantRegistry(
        presence, Mock(), Mock(), EventConfig(**config), clock, listener=listener
    )
    return registry, presence, clock


class TestIdentifier:
    """Tests for resolve_identifier."""

    def test_uses_identifier_flag(self):
        """Test the identifier flag wins when set."""
        actor = SimulatedActor(1, "Alice", identifier="steam:abc")
        assert resolve_identifier(actor) == "steam:abc"

    def test_falls_back_to_name_handle(self):
        """Test name-handle fallback."""
        assert resolve_identifier(SimulatedActor(7, "Bob")) == "Bob-7"


class TestPrepare:
    """Tests for prepare()."""

    def test_prepares_every_connected_actor(self):
        """Test every actor becomes a live participant."""
        registry, presence, _ = make_registry(3)
        assert registry.prepare(1, Point3(10, 20, 5)) == 3
        assert registry.alive_count() == 3
        assert registry.event_id == 1

    def test_join_side_effects(self):
        """Test teleport, heal, loadout and flags on join."""
        registry, presence, _ = make_registry(1, starting_bandages=2)
        actor = presence.lookup(1)
        actor.set_health(12)
        actor.give_item("weapon_knife", 1)

        registry.prepare(1, Point3(10, 20, 5))

        assert actor.position == Point3(10, 20, 5)
        assert actor.health == 100
        assert actor.items == {}
        assert actor.get_flag(FLAG_ALIVE) is True
        assert actor.get_flag(FLAG_BANDAGES) == 2
        registry.store.record_participant_join.assert_called_once_with(1, "Bot1-1", "Bot1")
        registry.match_log.log.assert_called_with(1, "JOIN", "Bot1 joined the event")

    def test_last_safe_at_starts_at_now(self):
        """Test a fresh participant's grace is anchored at prepare time."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        assert registry.get(1).last_safe_at == 100.0

    def test_replaces_previous_contents(self):
        """Test prepare clears participants of an earlier event."""
        registry, presence, _ = make_registry(2)
        registry.prepare(1, Point3(0, 0))
        presence.disconnect(2)
        registry.prepare(2, Point3(0, 0))
        assert registry.get(2) is None
        assert registry.alive_count() == 1

    def test_store_failure_does_not_abort(self):
        """Test a failing join write is absorbed."""
        registry, _, _ = make_registry(2)
        registry.store.record_participant_join.side_effect = RuntimeError("db down")
        assert registry.prepare(1, Point3(0, 0)) == 2


class TestDamageAndElimination:
    """Tests for apply_damage() and eliminate()."""

    def test_damage_reduces_health(self):
        """Test damage reduces health and accumulates."""
        registry, presence, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.apply_damage(1, 30)
        registry.apply_damage(1, 20)
        assert presence.lookup(1).health == 50
        assert registry.get(1).damage_taken == 50

    def test_health_floors_at_zero_and_eliminates_once(self):
        """Test health never negative and elimination fires once."""
        listener = Mock()
        registry, presence, _ = make_registry(1, listener=listener)
        registry.prepare(1, Point3(0, 0))

        registry.apply_damage(1, 80)
        registry.apply_damage(1, 80)
        registry.apply_damage(1, 80)

        assert presence.lookup(1).health == 0
        assert registry.is_alive(1) is False
        listener.on_participant_eliminated.assert_called_once()
        registry.store.mark_participant_death.assert_called_once_with(1, "Bot1-1")

    def test_dead_participant_takes_no_damage(self):
        """Test damage after death does not accumulate."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(1)
        registry.apply_damage(1, 10)
        assert registry.get(1).damage_taken == 0

    def test_unknown_handle_is_noop(self):
        """Test unknown handles never raise."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.apply_damage(99, 10)
        registry.grant_immunity(99, 5)
        registry.mark_safe(99)
        assert registry.eliminate(99) is False
        assert registry.is_immune(99) is False
        assert registry.position_of(99) is None

    def test_disconnected_actor_takes_no_damage(self):
        """Test a participant whose actor left mid-tick is skipped."""
        registry, presence, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        presence.disconnect(1)
        registry.apply_damage(1, 500)
        assert registry.is_alive(1)

    def test_eliminate_is_idempotent(self):
        """Test second eliminate returns False and calls nothing."""
        listener = Mock()
        registry, _, _ = make_registry(1, listener=listener)
        registry.prepare(1, Point3(0, 0))
        assert registry.eliminate(1) is True
        assert registry.eliminate(1) is False
        listener.on_participant_eliminated.assert_called_once()

    def test_elimination_sends_to_spectator(self):
        """Test the eliminated actor is handed to spectator mode."""
        registry, presence, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(1)
        actor = presence.lookup(1)
        assert actor.dimension == 999
        assert actor.events_named(SPECTATOR_MODE_EVENT) == [(True,)]
        assert actor.get_flag(FLAG_ALIVE) is False
        assert "You have been eliminated!" in actor.notifications

    def test_listener_receives_copy(self):
        """Test the listener cannot mutate registry state."""
        listener = Mock()
        registry, _, _ = make_registry(1, listener=listener)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(1)
        participant = listener.on_participant_eliminated.call_args[0][0]
        participant.alive = True
        assert registry.is_alive(1) is False


class TestImmunity:
    """Tests for immunity windows."""

    def test_grant_and_expire(self):
        """Test immunity holds until immune_until."""
        registry, presence, clock = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.grant_immunity(1, 15)

        assert registry.is_immune(1) is True
        clock.advance(14.9)
        assert registry.is_immune(1) is True
        clock.advance(0.1)
        assert registry.is_immune(1) is False
        assert "You are immune for 15 seconds!" in presence.lookup(1).notifications

    def test_immunity_persisted(self):
        """Test immunity_until is written to the store."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.grant_immunity(1, 15)
        kwargs = registry.store.update_participant_stats.call_args.kwargs
        assert "immunity_until" in kwargs


class TestQueries:
    """Tests for snapshots and reset."""

    def test_get_alive_is_snapshot(self):
        """Test get_alive returns copies."""
        registry, _, _ = make_registry(2)
        registry.prepare(1, Point3(0, 0))
        alive = registry.get_alive()
        alive[0].alive = False
        assert registry.alive_count() == 2

    def test_reset(self):
        """Test reset clears participants and event id."""
        registry, _, _ = make_registry(2)
        registry.prepare(1, Point3(0, 0))
        registry.reset()
        assert registry.alive_count() == 0
        assert registry.event_id is None

    def test_start_grace_only_when_unset(self):
        """Test start_grace does not overwrite a known safe time."""
        registry, _, clock = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        clock.advance(30)
        registry.start_grace(1)
        assert registry.get(1).last_safe_at == 100.0

    def test_mark_safe_updates_time(self):
        """Test mark_safe refreshes last_safe_at."""
        registry, _, clock = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        clock.advance(7)
        registry.mark_safe(1)
        assert registry.get(1).last_safe_at == 107.0


class TestKillsAndBandages:
    """Tests for record_kill() and use_bandage()."""

    def test_record_kill(self):
        """Test kills accumulate and persist."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.record_kill(1)
        registry.record_kill(1)
        assert registry.get(1).kills == 2
        registry.store.update_participant_stats.assert_called_with(1, "Bot1-1", kills=2)

    def test_bandage_heals_capped(self):
        """Test bandage heals up to max health."""
        registry, presence, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        presence.lookup(1).set_health(90)

        result = registry.use_bandage(1)

        assert result == {"success": True, "health": 100, "remaining": 0}
        assert presence.lookup(1).get_flag(FLAG_BANDAGES) == 0

    def test_bandage_runs_out(self):
        """Test using a bandage with none left fails."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.use_bandage(1)
        result = registry.use_bandage(1)
        assert result["success"] is False
        assert result["reason"] == "You have no bandages left."

    def test_bandage_dead_participant(self):
        """Test dead participants cannot bandage."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(1)
        assert registry.use_bandage(1) == {"success": False, "reason": "Invalid player."}


class TestLoadoutHelpers:
    """Tests for give_item, emit_to_alive and teleport_all."""

    def test_give_item_with_strip(self):
        """Test strip clears the loadout before giving."""
        registry, presence, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        presence.lookup(1).give_item("weapon_knife", 1)
        assert registry.give_item(1, "weapon_bat", 0, strip=True) is True
        assert presence.lookup(1).items == {"weapon_bat": 0}

    def test_give_item_to_dead_fails(self):
        """Test dead participants receive nothing."""
        registry, _, _ = make_registry(1)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(1)
        assert registry.give_item(1, "weapon_bat", 0) is False

    def test_emit_to_alive_skips_dead(self):
        """Test client events only reach live participants."""
        registry, presence, _ = make_registry(2)
        registry.prepare(1, Point3(0, 0))
        registry.eliminate(2)
        registry.emit_to_alive("arena:test", 1)
        assert presence.lookup(1).events_named("arena:test") == [(1,)]
        assert presence.lookup(2).events_named("arena:test") == []

    def test_teleport_all(self):
        """Test every participant is moved."""
        registry, presence, _ = make_registry(2)
        registry.prepare(1, Point3(0, 0))
        registry.teleport_all(Point3(5, 5))
        assert all(a.position == Point3(5, 5) for a in presence.connected_actors())


class TestSpectating:
    """Tests for attaching spectators to other actors."""

    def test_attach_copies_dimension_and_position(self):
        """Test the spectator joins the target's dimension at its position."""
        registry, presence, _ = make_registry(2)
        target = presence.lookup(2)
        target.set_dimension(4)
        target.move_to((30, -12, 5))

        assert registry.attach_spectator(1, 2) is True

        spectator = presence.lookup(1)
        assert spectator.dimension == 4
        assert spectator.position == Point3(30, -12, 5)
        assert spectator.events_named(SPECTATOR_ATTACH_EVENT) == [(2,)]
        assert registry.spectator_target(1) == 2
        assert registry.is_spectating(1)

    def test_attach_to_missing_or_self_fails(self):
        """Test unknown targets and self-attachment are refused."""
        registry, _, _ = make_registry(2)
        assert registry.attach_spectator(1, 42) is False
        assert registry.attach_spectator(42, 1) is False
        assert registry.attach_spectator(1, 1) is False
        assert not registry.is_spectating(1)

    def test_reattach_replaces_target(self):
        """Test a second attach follows the new target."""
        registry, _, _ = make_registry(3)
        registry.attach_spectator(1, 2)
        registry.attach_spectator(1, 3)
        assert registry.spectator_target(1) == 3

    def test_detach_clears_target(self):
        """Test detach emits the client event and forgets the target."""
        registry, presence, _ = make_registry(2)
        registry.attach_spectator(1, 2)
        assert registry.detach_spectator(1) is True
        assert presence.lookup(1).events_named(SPECTATOR_DETACH_EVENT) == [()]
        assert registry.spectator_target(1) is None
        assert registry.detach_spectator(1) is False

    def test_elimination_clears_target(self):
        """Test the spectator hand-off drops any previous target."""
        registry, _, _ = make_registry(3)
        registry.prepare(1, Point3(0, 0))
        registry.attach_spectator(1, 2)
        registry.eliminate(1)
        assert not registry.is_spectating(1)

    def test_reset_and_prepare_clear_targets(self):
        """Test both lifecycle boundaries forget spectator targets."""
        registry, _, _ = make_registry(2)
        registry.attach_spectator(1, 2)
        registry.reset()
        assert not registry.is_spectating(1)
        registry.attach_spectator(2, 1)
        registry.prepare(1, Point3(0, 0))
        assert not registry.is_spectating(2)
