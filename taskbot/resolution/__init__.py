"""Name-to-id resolution and due-date normalisation."""

from taskbot.resolution.dates import DueDate, DueKind, parse_due
from taskbot.resolution.resolver import EntityResolver, ResolutionBatch, match_person, match_project

__all__ = [
    "DueDate",
    "DueKind",
    "EntityResolver",
    "ResolutionBatch",
    "match_person",
    "match_project",
    "parse_due",
]
