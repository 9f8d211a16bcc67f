from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from app.models.healthcare import (
    DocumentStatistics,
    HealthcareResult,
    RequestStatistics,
    TextAnalyticsError,
    TextAnalyticsWarning,
)
from app.services.healthcare.errors import InvalidReference
from app.services.healthcare.resolver import HealthcareEntity, resolve_related_entities

logger = logging.getLogger(__name__)

INVALID_DOCUMENT_REFERENCE = "InvalidDocumentReference"


@dataclass(frozen=True)
class AnalyzeHealthcareEntitiesResult:
    id: str
    entities: list[HealthcareEntity] = field(default_factory=list)
    warnings: list[TextAnalyticsWarning] = field(default_factory=list)
    statistics: DocumentStatistics | None = None
    error: TextAnalyticsError | None = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class AnalyzeHealthcareEntitiesResultCollection:
    results: list[AnalyzeHealthcareEntitiesResult]
    statistics: RequestStatistics | None
    model_version: str


def convert_to_error(error: TextAnalyticsError) -> TextAnalyticsError:
    # innermost error is only ever one level down
    if error.innererror is not None:
        inner = error.innererror
        return TextAnalyticsError(code=inner.code, message=inner.message, target=inner.target)

    return TextAnalyticsError(code=error.code, message=error.message, target=error.target)


def convert_to_warnings(warnings: list[TextAnalyticsWarning] | None) -> list[TextAnalyticsWarning]:
    if warnings is None:
        return []

    return list(warnings)


def convert_to_healthcare_result_collection(
    result: HealthcareResult,
    id_to_index: Mapping[str, int] | None = None,
) -> AnalyzeHealthcareEntitiesResultCollection:
    """
    Error documents pass through, every other document gets its relation
    graph resolved. A document whose relations can't be resolved becomes an
    error result on its own; the rest of the batch is unaffected.

    Ordered by id_to_index (document id -> caller position). Without a
    mapping the input order is kept. A supplied mapping must cover every id.
    """
    out: list[AnalyzeHealthcareEntitiesResult] = []

    for doc_err in result.errors:
        out.append(AnalyzeHealthcareEntitiesResult(id=doc_err.id, error=convert_to_error(doc_err.error)))

    for doc in result.documents:
        try:
            entities = resolve_related_entities(doc.entities, doc.relations)
        except InvalidReference as e:
            logger.warning("document relations unresolved doc_id=%s reference=%r", doc.id, e.reference)
            out.append(
                AnalyzeHealthcareEntitiesResult(
                    id=doc.id,
                    error=TextAnalyticsError(
                        code=INVALID_DOCUMENT_REFERENCE,
                        message=str(e),
                        target=e.reference,
                    ),
                    warnings=convert_to_warnings(doc.warnings),
                    statistics=doc.statistics,
                )
            )
            continue

        out.append(
            AnalyzeHealthcareEntitiesResult(
                id=doc.id,
                entities=entities,
                warnings=convert_to_warnings(doc.warnings),
                statistics=doc.statistics,
            )
        )

    if id_to_index is not None:
        out = sorted(out, key=lambda r: id_to_index[r.id])

    return AnalyzeHealthcareEntitiesResultCollection(
        results=out,
        statistics=result.statistics,
        model_version=result.model_version,
    )
