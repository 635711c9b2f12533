"""
Shared pytest fixtures for the scoring engine and HTTP service tests.

Reference catalog layout (leadmind/data):
  questions 1-8 growth, 9-16 sharing, 17-23 interaction
  concerns  1, 2, 4 -> E      3, 5 -> E+G     6-9 -> G
            10-13 -> C        14, 15 -> L
"""
import pytest
from fastapi.testclient import TestClient

from leadmind.config import settings
from leadmind.core.assessments import AssessmentStore
from leadmind.core.catalog import ContentStore
from leadmind.core.concerns import ConcernCatalog
from leadmind.core.models import Concern, ConcernCategory, Dimension

ADMIN_KEY = "test-admin-key"

# Concern ids by their category tags in the reference catalog
E_ONLY = ["1", "2", "4"]
E_AND_G = ["3", "5"]
G_ONLY = ["6", "7", "8", "9"]
C_ONLY = ["10", "11", "12", "13"]
L_ONLY = ["14", "15"]


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def reference_store():
    """Content loaded from the packaged JSON files"""
    return ContentStore.from_settings(settings)


@pytest.fixture
def questions(reference_store):
    return reference_store.questions


@pytest.fixture
def concern_catalog(reference_store):
    return reference_store.concerns


def make_concern(concern_id, *categories):
    """Build a catalog entry tagged with the given category letters"""
    return Concern(
        id=concern_id,
        label=f"Concern {concern_id}",
        categories=[ConcernCategory(c) for c in categories],
    )


def make_catalog(*entries):
    """entries: (id, "E") or (id, "E", "G") tuples"""
    return ConcernCatalog([make_concern(entry[0], *entry[1:]) for entry in entries])


def answers_for(questions, growth=None, sharing=None, interaction=None):
    """Answer every question of a dimension with the same score; None skips it"""
    values = {
        Dimension.GROWTH: growth,
        Dimension.SHARING: sharing,
        Dimension.INTERACTION: interaction,
    }
    return {
        q.id: values[q.dimension]
        for q in questions
        if values[q.dimension] is not None
    }


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client(reference_store, monkeypatch):
    """
    TestClient over fresh stores. The lifespan is not entered, so the
    content store set here is the one every request sees.
    """
    from leadmind.api import routes
    from leadmind.main import app

    routes.set_content_store(reference_store)
    routes.set_assessment_store(AssessmentStore())
    monkeypatch.setattr(settings, "ADMIN_API_KEY", ADMIN_KEY)

    yield TestClient(app)

    routes.set_content_store(None)
    routes.set_assessment_store(None)


@pytest.fixture
def admin_headers():
    return {"X-API-Key": ADMIN_KEY}
