from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    # service payloads are camelCase; python callers may use field names
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())


class EntityDataSource(_WireModel):
    name: str = Field(..., alias="dataSource")
    entity_id: str = Field(..., alias="id")


class HealthcareEntityRecord(_WireModel):
    text: str
    category: str
    subcategory: str | None = None
    confidence_score: float = Field(..., ge=0.0, le=1.0, alias="confidenceScore")
    offset: int = Field(..., ge=0)
    length: int = Field(..., ge=0)
    links: list[EntityDataSource] = Field(default_factory=list)


class HealthcareRelationRecord(_WireModel):
    relation_type: str = Field(..., alias="relationType")
    source: str
    target: str


class TextAnalyticsWarning(_WireModel):
    code: str
    message: str


class TextAnalyticsError(_WireModel):
    code: str
    message: str
    target: str | None = None
    innererror: "TextAnalyticsError | None" = None


class DocumentStatistics(_WireModel):
    characters_count: int = Field(..., alias="charactersCount")
    transactions_count: int = Field(..., alias="transactionsCount")


class DocumentHealthcareEntities(_WireModel):
    id: str
    entities: list[HealthcareEntityRecord] = Field(default_factory=list)
    relations: list[HealthcareRelationRecord] = Field(default_factory=list)
    warnings: list[TextAnalyticsWarning] | None = None
    statistics: DocumentStatistics | None = None


class DocumentError(_WireModel):
    id: str
    error: TextAnalyticsError


class RequestStatistics(_WireModel):
    documents_count: int = Field(..., alias="documentsCount")
    valid_documents_count: int = Field(..., alias="validDocumentsCount")
    erroneous_documents_count: int = Field(..., alias="erroneousDocumentsCount")
    transactions_count: int = Field(..., alias="transactionsCount")


class HealthcareResult(_WireModel):
    documents: list[DocumentHealthcareEntities] = Field(default_factory=list)
    errors: list[DocumentError] = Field(default_factory=list)
    statistics: RequestStatistics | None = None
    model_version: str = Field("", alias="modelVersion")


# API


class ResolveRequest(BaseModel):
    result: HealthcareResult
    document_order: list[str] | None = None  # document ids, caller order


class RelatedEntityOut(BaseModel):
    entity_index: int
    reference: str
    relation_type: str


class HealthcareEntityOut(BaseModel):
    index: int
    text: str
    category: str
    subcategory: str | None
    confidence_score: float
    offset: int
    length: int
    data_sources: list[EntityDataSource]
    related: list[RelatedEntityOut]


class ErrorOut(BaseModel):
    code: str
    message: str
    target: str | None = None


class DocumentResultOut(BaseModel):
    id: str
    has_error: bool
    error: ErrorOut | None = None
    entities: list[HealthcareEntityOut] = Field(default_factory=list)
    warnings: list[TextAnalyticsWarning] = Field(default_factory=list)
    statistics: DocumentStatistics | None = None


class ResolveResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_version: str
    statistics: RequestStatistics | None
    results: list[DocumentResultOut]


class ParseReferenceRequest(BaseModel):
    reference: str
    entity_count: int = Field(..., ge=0)


class ParseReferenceResponse(BaseModel):
    reference: str
    document_index: int
    entity_index: int
