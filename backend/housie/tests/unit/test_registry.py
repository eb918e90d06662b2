import logging

from housie.logic.enums import PrizeFormat, RoundPhase
from housie.session.registry import ROOM_ID_LENGTH, RoomRegistry, generate_room_id
from housie.tests.helpers import HOST, START_TIME, FakeClock


class TestGenerateRoomId:
    def test_format(self):
        room_id = generate_room_id()
        assert len(room_id) == ROOM_ID_LENGTH
        assert room_id.isalnum()
        assert room_id == room_id.upper()


class TestRoomRegistryCreate:
    def test_host_seated_without_tickets(self, registry):
        room = registry.create(HOST)
        assert room.players[0].player_id == HOST.player_id
        assert room.players[0].is_host
        assert room.players[0].tickets == []
        assert room.phase == RoundPhase.LOBBY
        assert room.created_at == START_TIME

    def test_new_room_is_clean(self, registry):
        room = registry.create(HOST)
        assert room.called_numbers == []
        assert room.current_number is None
        assert room.number_pool.is_exhausted
        assert not room.is_game_started
        assert not room.is_game_over
        assert all(record is None for _, record in room.prize_ledger.items())

    def test_settings_override_applied(self, registry):
        room = registry.create(HOST, {"lobby_size": 3, "prize_format": "extended"})
        assert room.settings.lobby_size == 3
        assert room.settings.prize_format == PrizeFormat.EXTENDED

    def test_room_is_retrievable(self, registry):
        room = registry.create(HOST)
        assert registry.get(room.room_id) is room
        assert room.room_id in registry
        assert registry.room_count == 1

    def test_id_collision_resamples(self, caplog):
        ids = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
        registry = RoomRegistry(clock=FakeClock(), id_factory=lambda: next(ids))
        first = registry.create(HOST)
        with caplog.at_level(logging.WARNING):
            second = registry.create(HOST)
        assert first.room_id == "AAAAAA"
        assert second.room_id == "BBBBBB"
        assert "collision" in caplog.text


class TestRoomRegistryExpiry:
    def test_unstarted_room_expires_after_window(self, clock):
        expired = []
        registry = RoomRegistry(inactivity_seconds=60, clock=clock, on_expire=expired.append)
        room = registry.create(HOST)
        clock.advance(61)
        assert registry.get(room.room_id) is None
        assert room.room_id not in registry
        assert expired == [room.room_id]

    def test_room_inside_window_is_kept(self, clock):
        registry = RoomRegistry(inactivity_seconds=60, clock=clock)
        room = registry.create(HOST)
        clock.advance(60)
        assert registry.get(room.room_id) is room

    def test_started_room_never_expires(self, clock):
        registry = RoomRegistry(inactivity_seconds=60, clock=clock)
        room = registry.create(HOST)
        room.is_game_started = True
        clock.advance(10_000)
        assert registry.get(room.room_id) is room

    def test_missing_room(self, registry):
        assert registry.get("NOPE00") is None


class TestRoomRegistryDelete:
    def test_delete(self, registry):
        room = registry.create(HOST)
        assert registry.delete(room.room_id)
        assert not registry.delete(room.room_id)
        assert list(registry) == []
