"""Handle allocation and the table of decoded entries.

Every new object, class descriptor, string, array or enum in a stream is
assigned the next handle in sequence so later records can refer back to
it.  Handles are allocated when decoding of an entry *starts* but the entry
can only be stored once it is complete, after everything nested inside it.
The table therefore keeps a stack of pending handles: registration must
happen in exactly the reverse order of allocation.
"""
from __future__ import annotations

import logging

from jaded.errors import RegistrationOrderError, UnknownReferenceError
from jaded.model.references import NULL_REFERENCE, Reference
from jaded.stream.markers import INITIAL_HANDLE, NULL_HANDLE

logger = logging.getLogger(__name__)


class HandleTable:
    """Arena of decoded entries keyed by handle."""

    __slots__ = ("_next", "_pending", "_entries")

    def __init__(self) -> None:
        self._next: int = INITIAL_HANDLE
        self._pending: list[int] = []
        self._entries: dict[int, Reference] = {}

    # ------------------------------------------------------------------
    # Allocation and registration
    # ------------------------------------------------------------------

    def next_handle(self) -> int:
        """Allocate the next handle and mark it as pending."""
        handle = self._next
        self._pending.append(handle)
        self._next += 1
        return handle

    def register(self, handle: int, reference: Reference) -> None:
        """Store ``reference`` under ``handle``.

        Raises
        ------
        RegistrationOrderError
            If ``handle`` is not the most recently allocated pending handle.
            The pending stack is left untouched in that case.
        """
        top = self._pending[-1] if self._pending else None
        if top != handle:
            raise RegistrationOrderError(handle, top)
        self._pending.pop()
        self._entries[handle] = reference

    def discard_pending(self) -> None:
        """Drop handles that were allocated but never registered."""
        if self._pending:
            logger.debug("Discarding %d pending handles", len(self._pending))
            self._pending.clear()

    def reset(self) -> None:
        """Forget all entries and restart numbering at ``INITIAL_HANDLE``."""
        logger.debug("Resetting handle table (%d entries)", len(self._entries))
        self._next = INITIAL_HANDLE
        self._entries.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, handle: int) -> Reference:
        """Return the entry for ``handle``.

        ``NULL_HANDLE`` always resolves to the null entry.

        Raises
        ------
        UnknownReferenceError
            If nothing is registered under ``handle``.
        """
        if handle == NULL_HANDLE:
            return NULL_REFERENCE
        try:
            return self._entries[handle]
        except KeyError:
            raise UnknownReferenceError(handle) from None

    def __contains__(self, handle: object) -> bool:
        return handle == NULL_HANDLE or handle in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def pending_position(self, handle: int) -> int | None:
        """Return the index of ``handle`` on the pending stack, counted from
        the bottom, or ``None`` if it is not pending."""
        try:
            return self._pending.index(handle)
        except ValueError:
            return None

    @property
    def pending(self) -> tuple[int, ...]:
        """Handles allocated but not yet registered, oldest first."""
        return tuple(self._pending)

    @property
    def next_value(self) -> int:
        """The handle the next allocation will return."""
        return self._next
