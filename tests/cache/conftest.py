import pytest

from fakes import FakeClock, make_provider


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return make_provider()
