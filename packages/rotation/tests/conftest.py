import pytest

from factories import make_candidates, make_slots


@pytest.fixture
def three_slots():
    return make_slots(3)


@pytest.fixture
def three_candidates():
    return make_candidates(3)
