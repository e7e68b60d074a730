import pytest

from factories import scenario_b1


@pytest.fixture
def b1():
    """Bottle B1 and its four events (Alice, Bob, Carol)."""
    return scenario_b1()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "bottles.db")
