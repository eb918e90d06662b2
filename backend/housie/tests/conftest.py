import pytest

from housie.session.adjudicator import PrizeAdjudicator
from housie.session.lifecycle import GameLifecycle
from housie.session.registry import RoomRegistry
from housie.tests.helpers import ALICE, HOST, FakeClock, fixed_ticket_factory
from housie.tests.mocks import FakeScheduler, MockConnection, RecordingNotifier


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def registry(clock):
    return RoomRegistry(clock=clock)


@pytest.fixture
def lifecycle(registry, scheduler):
    return GameLifecycle(registry, scheduler, ticket_factory=fixed_ticket_factory)


@pytest.fixture
def adjudicator(registry, scheduler):
    return PrizeAdjudicator(registry, scheduler)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def mock_connection():
    return MockConnection()


@pytest.fixture
def lobby(lifecycle):
    """Room with the host and Alice seated, each holding one fixed ticket."""
    room = lifecycle.create_room(HOST)
    lifecycle.join(room.room_id, HOST)
    lifecycle.join(room.room_id, ALICE)
    return room


@pytest.fixture
def started_room(lifecycle, lobby):
    lifecycle.start(lobby.room_id, HOST.player_id)
    return lobby
