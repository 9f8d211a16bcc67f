import pytest

from app.core.config import settings
from app.models.healthcare import HealthcareEntityRecord, HealthcareRelationRecord


def ref(entity_index: int, document_index: int = 0) -> str:
    return f"#/results/documents/{document_index}/entities/{entity_index}"


def make_entity(text: str, category: str = "MedicationName", offset: int = 0) -> HealthcareEntityRecord:
    return HealthcareEntityRecord(
        text=text,
        category=category,
        confidence_score=0.9,
        offset=offset,
        length=len(text),
    )


def make_relation(relation_type: str, source: int, target: int) -> HealthcareRelationRecord:
    return HealthcareRelationRecord(relation_type=relation_type, source=ref(source), target=ref(target))


@pytest.fixture()
def cache_disabled():
    """
    Disables the response cache for a test and restores the original
    value after execution.
    """
    old = settings.ENABLE_CACHE
    settings.ENABLE_CACHE = False
    yield
    settings.ENABLE_CACHE = old
