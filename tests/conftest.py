import pytest

from homestead.engine import GameEngine, GameSettings


class FakeClock:
    def __init__(self, start: int = 1000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_engine(clock):
    def _make(**overrides):
        engine = GameEngine(settings=GameSettings(**overrides), clock=clock)
        engine.initialize_world()
        return engine
    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()


@pytest.fixture
def player(engine):
    return engine.create_player("alice", "Alice")
