import random

import pytest

from portal.config import DEFAULT_CONFIG, merge_config
from portal.loader import load_knowledge
from portal.pipeline import QueryPipeline
from portal.store import PortalStore


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def knowledge():
    return load_knowledge()


@pytest.fixture
def config():
    # never sweep unless a test asks for it
    return merge_config(DEFAULT_CONFIG, {"cache": {"sweep_probability": 0.0}})


@pytest.fixture
def store(config, clock):
    return PortalStore(config, clock=clock, rng=random.Random(7))


@pytest.fixture
def pipeline(config, knowledge, store, clock):
    return QueryPipeline(config, knowledge, store, rng=random.Random(7), clock=clock)
