"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class PoclidexError(Exception):
    pass

class InvalidGeneration(PoclidexError, ValueError):
    def __init__(self, generation: object):
        super().__init__(f"Invalid generation: {generation!r}. Must be between 1 and 9.")
        self.generation = generation

class UpstreamFailure(PoclidexError):
    """A fetch collaborator (HTTP, subprocess) failed."""
    def __init__(self, resource: str, detail: str, status: int | None = None):
        super().__init__(f"Failed to fetch {resource}: {detail}")
        self.resource = resource
        self.detail = detail
        self.status = status

class NotFoundError(UpstreamFailure):
    def __init__(self, resource: str, detail: str = "not found"):
        super().__init__(resource, detail, status=404)

class MalformedInput(PoclidexError):
    def __init__(self, record: str, detail: str):
        super().__init__(f"Malformed {record} record: {detail}")
        self.record = record
        self.detail = detail
