from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from app.models.healthcare import EntityDataSource, HealthcareEntityRecord, HealthcareRelationRecord
from app.services.healthcare.references import parse_reference

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class HealthcareEntity:
    """
    One recognized healthcare concept in a document, plus the entities it
    points to through relations.

    Hash/equality are object identity: two entities with the same text at
    different positions are different keys in related_entities.
    """

    index: int
    text: str
    category: str
    subcategory: str | None
    confidence_score: float
    offset: int
    length: int
    data_sources: tuple[EntityDataSource, ...] = ()
    # target index -> (target node, relation type); insertion = relation order
    _links: dict[int, tuple[HealthcareEntity, str]] = field(
        default_factory=dict, repr=False
    )

    @classmethod
    def from_record(cls, index: int, record: HealthcareEntityRecord) -> HealthcareEntity:
        return cls(
            index=index,
            text=record.text,
            category=record.category,
            subcategory=record.subcategory,
            confidence_score=record.confidence_score,
            offset=record.offset,
            length=record.length,
            data_sources=tuple(record.links),
        )

    @property
    def related_entities(self) -> dict[HealthcareEntity, str]:
        return {target: relation_type for target, relation_type in self._links.values()}

    @property
    def related_indices(self) -> dict[int, str]:
        return {idx: relation_type for idx, (_, relation_type) in self._links.items()}

    def iter_related(self, max_depth: int | None = None) -> Iterator[HealthcareEntity]:
        """
        Breadth-first walk over everything reachable through relations.
        Each entity is yielded once; the starting entity is never yielded,
        even when a cycle leads back to it.
        """
        visited = {self.index}
        queue: deque[tuple[HealthcareEntity, int]] = deque([(self, 0)])

        while queue:
            node, depth = queue.popleft()
            if max_depth is not None and depth >= max_depth:
                continue

            for idx, (target, _) in node._links.items():
                if idx in visited:
                    continue
                visited.add(idx)
                yield target
                queue.append((target, depth + 1))

    def _link(self, target: HealthcareEntity, relation_type: str) -> None:
        previous = self._links.get(target.index)
        if previous is not None and previous[1] != relation_type:
            logger.debug(
                "relation override source=%d target=%d old=%s new=%s",
                self.index,
                target.index,
                previous[1],
                relation_type,
            )

        self._links[target.index] = (target, relation_type)


def _outgoing_edges(
    relations: Sequence[HealthcareRelationRecord], entity_count: int
) -> list[tuple[int, int, str]]:
    """
    Parse every relation up front, so a bad reference fails the whole
    document before any node is wired.
    """
    edges: list[tuple[int, int, str]] = []

    for rel in relations:
        src = parse_reference(rel.source, entity_count)
        dst = parse_reference(rel.target, entity_count)
        edges.append((src, dst, rel.relation_type))

    return edges


def resolve_related_entities(
    entities: Sequence[HealthcareEntityRecord],
    relations: Sequence[HealthcareRelationRecord],
) -> list[HealthcareEntity]:
    """
    Build one HealthcareEntity per input entity (same order) with its
    related entities fully materialized.

    Every index owns exactly one node, and edges are wired between those
    nodes. A relation that leads back into an entity already being
    resolved (A->B->A, self-loops) points at the existing node instead of
    expanding it again, so cyclic input yields a finite graph.

    When two relations from the same source hit the same target, the last
    relation type wins and the entry keeps its first position.

    Raises InvalidReference if any relation endpoint is malformed or out of
    range; no partial result is returned in that case.
    """
    nodes = [HealthcareEntity.from_record(i, rec) for i, rec in enumerate(entities)]

    if not relations:
        return nodes

    for src, dst, relation_type in _outgoing_edges(relations, len(nodes)):
        nodes[src]._link(nodes[dst], relation_type)

    return nodes
