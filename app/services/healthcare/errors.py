from __future__ import annotations


class HealthcareResolutionError(Exception):
    """
    Base class for failures while turning a healthcare response
    into a resolved entity graph.
    """


class InvalidReference(HealthcareResolutionError):
    """
    A relation endpoint does not follow
    '#/results/documents/{doc}/entities/{entity}' or points past
    the end of the document's entity list.
    """

    def __init__(self, reference: str, reason: str = "malformed"):
        self.reference = reference
        self.reason = reason
        super().__init__(f"Failed to parse element reference ({reason}): {reference!r}")
