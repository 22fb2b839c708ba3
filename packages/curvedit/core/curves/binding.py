"""Mirroring an externally owned point collection into a CurveModel.

The host owns an ordered collection of ControlPoints and announces every
add, insert, remove and reset. The model mirrors those events 1:1 so that
index i of the host collection is always index i of the curve. Points are
shared by reference: a drag in the editor writes straight into the host's
point objects.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, MutableSequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, overload

from curvedit.core.curves.models import ControlPoint

if TYPE_CHECKING:
    from curvedit.core.curves.model import CurveModel

logger = logging.getLogger(__name__)


class CollectionAction(str, Enum):
    """Kind of collection change notification."""

    ADD = "add"
    INSERT = "insert"
    REMOVE = "remove"
    RESET = "reset"


@dataclass(frozen=True)
class CollectionChange:
    """One change notification from the host collection.

    Attributes:
        action: What happened.
        index: Position of the first affected item (None for RESET).
        items: Affected items. For RESET, the new contents of the collection.
    """

    action: CollectionAction
    index: int | None = None
    items: tuple[ControlPoint, ...] = ()


CollectionListener = Callable[[CollectionChange], None]


class ObservablePointList(MutableSequence[ControlPoint]):
    """A host-side list of control points that announces its changes.

    Example:
        >>> source = ObservablePointList()
        >>> seen = []
        >>> _ = source.subscribe(seen.append)
        >>> source.append(ControlPoint(0.0, 0.0))
        >>> seen[0].action
        <CollectionAction.ADD: 'add'>
    """

    def __init__(self, items: Iterable[ControlPoint] = ()) -> None:
        self._items: list[ControlPoint] = list(items)
        self._listeners: list[CollectionListener] = []

    def subscribe(self, listener: CollectionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: CollectionChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> ControlPoint: ...

    @overload
    def __getitem__(self, index: slice) -> list[ControlPoint]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __setitem__(self, index, item) -> None:
        if isinstance(index, slice):
            raise TypeError("slice assignment is not supported")
        index = self._normalize(index)
        old = self._items[index]
        self._items[index] = item
        self._emit(CollectionChange(CollectionAction.REMOVE, index, (old,)))
        self._emit(CollectionChange(CollectionAction.INSERT, index, (item,)))

    def __delitem__(self, index) -> None:
        if isinstance(index, slice):
            raise TypeError("slice deletion is not supported")
        index = self._normalize(index)
        old = self._items.pop(index)
        self._emit(CollectionChange(CollectionAction.REMOVE, index, (old,)))

    def insert(self, index: int, value: ControlPoint) -> None:
        index = min(max(index if index >= 0 else len(self._items) + index, 0), len(self._items))
        self._items.insert(index, value)
        if index == len(self._items) - 1:
            self._emit(CollectionChange(CollectionAction.ADD, index, (value,)))
        else:
            self._emit(CollectionChange(CollectionAction.INSERT, index, (value,)))

    def clear(self) -> None:
        self._items.clear()
        self._emit(CollectionChange(CollectionAction.RESET))

    def reset(self, items: Iterable[ControlPoint]) -> None:
        """Replace the whole contents with one RESET notification."""
        self._items = list(items)
        self._emit(CollectionChange(CollectionAction.RESET, None, tuple(self._items)))

    def _normalize(self, index: int) -> int:
        if index < 0:
            index += len(self._items)
        if not 0 <= index < len(self._items):
            raise IndexError("point index out of range")
        return index


def bind(model: CurveModel, source: ObservablePointList) -> Callable[[], None]:
    """Mirror ``source`` into ``model`` now and on every later change.

    The model is reset to the source's current contents first.

    Returns:
        A callable that stops mirroring.
    """
    model.apply_collection_change(CollectionChange(CollectionAction.RESET, None, tuple(source)))
    logger.debug(f"Bound curve model to collection of {len(source)} points")
    return source.subscribe(model.apply_collection_change)
