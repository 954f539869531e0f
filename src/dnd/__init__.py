"""Drag-Reorder Coordinator for the form builder canvas."""

from .lib import (
    DROP_AREA,
    DROP_AREA_ID,
    DragCoordinator,
    DragDomain,
    DragEvent,
    DragItem,
    DragState,
    Mutation,
    MutationKind,
)

__all__ = [
    "DROP_AREA_ID",
    "DROP_AREA",
    "DragDomain",
    "DragState",
    "DragItem",
    "DragEvent",
    "MutationKind",
    "Mutation",
    "DragCoordinator",
]
