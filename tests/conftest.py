import os
import pytest

os.environ["FLASK_ENV"] = "testing"

from torneo import create_app
from torneo.extensions import db as _db
from torneo.events import event_bus


@pytest.fixture(scope="session")
def app():
    app = create_app("testing")
    yield app


@pytest.fixture(autouse=True)
def tables(app):
    """Create all tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(autouse=True)
def clean_bus():
    event_bus.clear()
    yield
    event_bus.clear()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tournament_with_date(app):
    """A points tournament with one four-team date. Returns (tournament, date)."""
    from torneo.services.tournament_service import create_tournament
    from torneo.services.date_service import add_tournament_date

    tournament = create_tournament("Copa Barrial")
    date = add_tournament_date(tournament.id, "Fecha 1", ["A", "B", "C", "D"])
    return tournament, date
