"""Drag-Reorder Coordinator: pointer gestures to schema mutations.

The coordinator is a small state machine (IDLE -> DRAGGING -> IDLE) fed
with drag-start, drag-over and drag-end events from whatever gesture
system hosts the builder. It knows three drag domains:

    - catalog item over the drop-area sentinel: append a new field
    - field over another field: reorder fields
    - choice row over another choice row: reorder the focused field's choices

Only the domain matching the drag's origin is ever acted on. A catalog
item hovering a choice row, or a field hovering the drop area, changes
nothing.

Reorders are applied live during drag-over, once per newly entered
target. Drag-end only repeats a reorder when released over a target that
was not already applied live, and only drag-end appends from the catalog.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from src.catalog import FieldType, resolve_field_type
from src.schema import FormSchema

logger = logging.getLogger(__name__)

DROP_AREA_ID = "FormElementDropArea"


class DragDomain(str, Enum):
    """What kind of element a draggable or droppable is."""

    CATALOG = "catalog"
    FIELD = "field"
    CHOICE = "choice"
    DROP_AREA = "drop_area"


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


class MutationKind(str, Enum):
    APPEND = "append"
    REORDER_FIELD = "reorder_field"
    REORDER_CHOICE = "reorder_choice"


@dataclass(frozen=True)
class DragItem:
    """A draggable element or a drop target.

    Attributes:
        id: Element id as the gesture system reports it. Catalog items use
            their type tag, fields their field id, choice rows
            ``choice-{index}``.
        domain: Which drag domain the element belongs to.
        field_type: Catalog type, for catalog items only.
        index: Current position, for choice rows only.
    """

    id: str
    domain: DragDomain
    field_type: FieldType | None = None
    index: int | None = None

    @classmethod
    def catalog(cls, field_type: FieldType | str) -> "DragItem":
        resolved = resolve_field_type(field_type)
        return cls(id=resolved.value, domain=DragDomain.CATALOG, field_type=resolved)

    @classmethod
    def field(cls, field_id: str) -> "DragItem":
        return cls(id=field_id, domain=DragDomain.FIELD)

    @classmethod
    def choice(cls, index: int) -> "DragItem":
        return cls(id=f"choice-{index}", domain=DragDomain.CHOICE, index=index)


DROP_AREA = DragItem(id=DROP_AREA_ID, domain=DragDomain.DROP_AREA)


@dataclass(frozen=True)
class DragEvent:
    """One gesture notification: what is dragged and what it is over."""

    active: DragItem
    over: DragItem | None = None


@dataclass(frozen=True)
class Mutation:
    """Record of a schema change caused by a drag.

    Attributes:
        kind: What happened.
        field_id: The appended field, the moved field, or the field whose
            choices moved.
        target_id: Field whose position the moved field took.
        from_index: Choice position before the move.
        to_index: Choice position after the move.
        field_type: Type of an appended field.
    """

    kind: MutationKind
    field_id: str
    target_id: str | None = None
    from_index: int | None = None
    to_index: int | None = None
    field_type: FieldType | None = None


# =============================================================================
# Coordinator
# =============================================================================


class DragCoordinator:
    """Translate drag events into mutations of one schema.

    Args:
        schema: The schema being edited. Choice drags act on its focused
            field.

    Example:
        >>> coordinator = DragCoordinator(schema)
        >>> item = DragItem.catalog(FieldType.DATE)
        >>> coordinator.on_drag_start(DragEvent(item))
        >>> coordinator.on_drag_over(DragEvent(item, DROP_AREA))
        >>> coordinator.indicator_armed
        True
        >>> coordinator.on_drag_end(DragEvent(item, DROP_AREA)).kind
        <MutationKind.APPEND: 'append'>
    """

    def __init__(self, schema: FormSchema):
        self.schema = schema
        self._reset()

    def _reset(self) -> None:
        self._state = DragState.IDLE
        self._active: DragItem | None = None
        self._indicator = False
        self._last_target: str | None = None
        self._choice_index: int | None = None

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def active(self) -> DragItem | None:
        """The element being dragged, or None when idle."""
        return self._active

    @property
    def indicator_armed(self) -> bool:
        """True while a catalog item hovers the drop-area sentinel."""
        return self._indicator

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on_drag_start(self, event: DragEvent) -> None:
        if self._state == DragState.DRAGGING:
            logger.debug(f"drag start while dragging {self._active}, restarting")
        self._reset()
        self._state = DragState.DRAGGING
        self._active = event.active
        if event.active.domain == DragDomain.CHOICE:
            self._choice_index = event.active.index

    def on_drag_over(self, event: DragEvent) -> Mutation | None:
        """Arm the indicator and apply live reorders.

        Returns:
            The mutation applied, or None if nothing changed.
        """
        if self._state != DragState.DRAGGING or self._active is None:
            return None

        over = event.over
        self._indicator = (
            self._active.domain == DragDomain.CATALOG
            and over is not None
            and over.domain == DragDomain.DROP_AREA
        )

        if over is None:
            self._last_target = None
            return None
        if over.id == self._last_target:
            return None
        self._last_target = over.id
        return self._apply_reorder(over)

    def on_drag_end(self, event: DragEvent) -> Mutation | None:
        """Finish the drag and apply the release mutation, if any.

        The indicator is disarmed and the coordinator returns to IDLE
        whatever the outcome.
        """
        if self._state != DragState.DRAGGING or self._active is None:
            self._reset()
            return None

        active, over = self._active, event.over
        last_target = self._last_target
        try:
            if over is None:
                logger.debug(f"drag of {active.id} released over nothing")
                return None
            if active.domain == DragDomain.CATALOG:
                if over.domain != DragDomain.DROP_AREA:
                    return None
                field = self.schema.append(active.field_type)
                logger.debug(f"Dropped {field.type.value} as field {field.id}")
                return Mutation(
                    kind=MutationKind.APPEND,
                    field_id=field.id,
                    field_type=field.type,
                )
            if over.id == last_target:
                return None
            return self._apply_reorder(over)
        finally:
            self._reset()

    def cancel(self) -> None:
        """Abort the drag without mutating anything."""
        self._reset()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _apply_reorder(self, over: DragItem) -> Mutation | None:
        active = self._active
        if active.domain == DragDomain.FIELD and over.domain == DragDomain.FIELD:
            if self.schema.reorder(active.id, over.id):
                return Mutation(
                    kind=MutationKind.REORDER_FIELD,
                    field_id=active.id,
                    target_id=over.id,
                )
            return None

        if active.domain == DragDomain.CHOICE and over.domain == DragDomain.CHOICE:
            field_id = self.schema.focused_id
            if field_id is None or self._choice_index is None or over.index is None:
                return None
            from_index = self._choice_index
            if self.schema.reorder_choice(field_id, from_index, over.index):
                self._choice_index = over.index
                return Mutation(
                    kind=MutationKind.REORDER_CHOICE,
                    field_id=field_id,
                    from_index=from_index,
                    to_index=over.index,
                )
            return None

        logger.debug(f"cross-domain hover {active.domain.value} over {over.domain.value}")
        return None


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
