import logging
import time

from fastapi import APIRouter, HTTPException, Request

from app.core.config import settings
from app.models.healthcare import (
    DocumentResultOut,
    ErrorOut,
    HealthcareEntityOut,
    HealthcareResult,
    ParseReferenceRequest,
    ParseReferenceResponse,
    RelatedEntityOut,
    ResolveRequest,
    ResolveResponse,
)
from app.services.cache.cache_keys import resolve_key
from app.services.healthcare.errors import InvalidReference
from app.services.healthcare.references import format_reference, parse_reference, split_reference
from app.services.healthcare.resolver import HealthcareEntity
from app.services.healthcare.transforms import (
    AnalyzeHealthcareEntitiesResult,
    convert_to_healthcare_result_collection,
)

router = APIRouter(tags=["healthcare"])
logger = logging.getLogger(__name__)


def _check_limits(result: HealthcareResult) -> None:
    if len(result.documents) + len(result.errors) > settings.MAX_DOCUMENTS_PER_REQUEST:
        raise HTTPException(status_code=413, detail="Too many documents in request.")

    for doc in result.documents:
        if len(doc.entities) > settings.MAX_ENTITIES_PER_DOCUMENT:
            raise HTTPException(
                status_code=413, detail=f"Document {doc.id} exceeds max entity count."
            )
        if len(doc.relations) > settings.MAX_RELATIONS_PER_DOCUMENT:
            raise HTTPException(
                status_code=413, detail=f"Document {doc.id} exceeds max relation count."
            )


def build_id_to_index(document_order: list[str] | None) -> dict[str, int] | None:
    if document_order is None:
        return None

    id_to_index: dict[str, int] = {}
    for pos, doc_id in enumerate(document_order):
        if doc_id in id_to_index:
            raise HTTPException(status_code=400, detail=f"Duplicate document id in order: {doc_id}")
        id_to_index[doc_id] = pos

    return id_to_index


def _check_order_covers(result: HealthcareResult, id_to_index: dict[str, int] | None) -> None:
    if id_to_index is None:
        return

    ids = [e.id for e in result.errors] + [d.id for d in result.documents]
    for doc_id in ids:
        if doc_id not in id_to_index:
            raise HTTPException(
                status_code=400, detail=f"Document id missing from document_order: {doc_id}"
            )


def entity_out(entity: HealthcareEntity, document_index: int) -> HealthcareEntityOut:
    return HealthcareEntityOut(
        index=entity.index,
        text=entity.text,
        category=entity.category,
        subcategory=entity.subcategory,
        confidence_score=entity.confidence_score,
        offset=entity.offset,
        length=entity.length,
        data_sources=list(entity.data_sources),
        related=[
            RelatedEntityOut(
                entity_index=idx,
                reference=format_reference(document_index, idx),
                relation_type=relation_type,
            )
            for idx, relation_type in entity.related_indices.items()
        ],
    )


def document_out(res: AnalyzeHealthcareEntitiesResult, document_index: int | None) -> DocumentResultOut:
    if res.error is not None:
        return DocumentResultOut(
            id=res.id,
            has_error=True,
            error=ErrorOut(code=res.error.code, message=res.error.message, target=res.error.target),
            warnings=res.warnings,
            statistics=res.statistics,
        )

    return DocumentResultOut(
        id=res.id,
        has_error=False,
        entities=[entity_out(e, document_index or 0) for e in res.entities],
        warnings=res.warnings,
        statistics=res.statistics,
    )


@router.post("/healthcare/resolve", response_model=ResolveResponse)
def resolve(request: Request, body: ResolveRequest) -> ResolveResponse:
    t0 = time.perf_counter()

    _check_limits(body.result)
    id_to_index = build_id_to_index(body.document_order)
    _check_order_covers(body.result, id_to_index)

    cache = getattr(request.app.state, "cache", None)
    use_cache = cache is not None and settings.ENABLE_CACHE

    key = None
    if use_cache:
        key = resolve_key(body.model_dump(mode="json", by_alias=True))
        cached = cache.get_json(key)

        if cached.hit:
            dt = (time.perf_counter() - t0) * 1000
            logger.info("resolve cache_hit=1 latency_ms=%.2f", dt)
            return ResolveResponse(**cached.value)

    collection = convert_to_healthcare_result_collection(body.result, id_to_index)

    # position of each document in the service response, used for references
    doc_positions = {doc.id: pos for pos, doc in enumerate(body.result.documents)}

    response_obj = ResolveResponse(
        model_version=collection.model_version,
        statistics=collection.statistics,
        results=[document_out(r, doc_positions.get(r.id)) for r in collection.results],
    )

    if use_cache:
        cache.set_json(key, response_obj.model_dump(mode="json"), settings.CACHE_TTL_SECONDS)

    dt = (time.perf_counter() - t0) * 1000
    logger.info(
        "resolve cache_hit=0 documents=%d errors=%d latency_ms=%.2f",
        len(collection.results),
        sum(1 for r in collection.results if r.has_error),
        dt,
    )

    return response_obj


@router.post("/healthcare/references/parse", response_model=ParseReferenceResponse)
def parse_reference_endpoint(body: ParseReferenceRequest) -> ParseReferenceResponse:
    try:
        entity_index = parse_reference(body.reference, body.entity_count)
    except InvalidReference as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ParseReferenceResponse(
        reference=body.reference,
        document_index=split_reference(body.reference).document_index,
        entity_index=entity_index,
    )
