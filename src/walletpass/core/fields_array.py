"""
FieldsArray: an ordered list of pass fields whose keys are unique across
every field group of the same pass.
"""
import copy
from collections.abc import Sequence
from typing import Any, Dict, Iterator, List, Optional, Protocol, Set, Type, Union, overload

from pydantic import BaseModel, ValidationError

from walletpass.core import messages
from walletpass.core.errors import BundleClosedError
from walletpass.schemas import PassFieldContent, validate
from walletpass.utils.logging import get_logger

logger = get_logger(__name__)

Field = Dict[str, Any]


class FreezableOwner(Protocol):
    @property
    def is_frozen(self) -> bool: ...


class FieldsArray(Sequence):
    """
    Read-only sequence of field dicts with validating mutators.

    ``pool`` is shared by all the field groups of one pass: a key reserved
    in one group cannot be used in another. Invalid fields and repeated
    keys are dropped with a warning instead of raising, so mutators return
    the number of fields actually inserted.
    """

    def __init__(
        self,
        owner: FreezableOwner,
        pool: Set[str],
        schema: Type[BaseModel] = PassFieldContent,
    ):
        self._owner = owner
        self._pool = pool
        self._schema = schema
        self._items: List[Field] = []

    @property
    def schema(self) -> Type[BaseModel]:
        return self._schema

    def _ensure_open(self) -> None:
        if self._owner.is_frozen:
            raise BundleClosedError(messages.BUNDLE_CLOSED)

    def _accept(self, candidates: tuple) -> List[Field]:
        """Validate candidates and reserve their keys; returns the accepted ones."""
        accepted: List[Field] = []
        for candidate in candidates:
            try:
                field = validate(self._schema, candidate)
            except ValidationError as exc:
                logger.warning(
                    "field_invalid",
                    schema=self._schema.__name__,
                    errors=exc.error_count(),
                    reason=str(exc),
                )
                continue

            key = field["key"]
            if key in self._pool:
                logger.warning("field_key_repeated", key=key)
                continue

            self._pool.add(key)
            accepted.append(field)
        return accepted

    def _release(self, fields: List[Field]) -> None:
        for field in fields:
            self._pool.discard(field["key"])

    def push(self, *fields: Any) -> int:
        """Append fields at the end. Returns how many were inserted."""
        self._ensure_open()
        accepted = self._accept(fields)
        self._items.extend(accepted)
        return len(accepted)

    def unshift(self, *fields: Any) -> int:
        """Prepend fields, keeping their order. Returns how many were inserted."""
        self._ensure_open()
        accepted = self._accept(fields)
        self._items[:0] = accepted
        return len(accepted)

    def pop(self) -> Optional[Field]:
        """Remove and return the last field (None when empty)."""
        self._ensure_open()
        if not self._items:
            return None
        field = self._items.pop()
        self._release([field])
        return field

    def shift(self) -> Optional[Field]:
        """Remove and return the first field (None when empty)."""
        self._ensure_open()
        if not self._items:
            return None
        field = self._items.pop(0)
        self._release([field])
        return field

    def splice(self, start: int, delete_count: Optional[int] = None, *items: Any) -> List[Field]:
        """
        Remove ``delete_count`` fields from ``start`` (all of them when
        omitted) and insert ``items`` in their place.

        Removed keys are released before the new items are checked, so a
        removed key can be reinserted by the same call.

        Returns:
            The removed fields
        """
        self._ensure_open()
        size = len(self._items)
        if start < 0:
            start = max(size + start, 0)
        start = min(start, size)
        if delete_count is None:
            delete_count = size - start
        end = start + max(delete_count, 0)

        removed = self._items[start:end]
        self._release(removed)
        accepted = self._accept(items)
        self._items[start:end] = accepted
        return removed

    def to_list(self) -> List[Field]:
        return copy.deepcopy(self._items)

    @overload
    def __getitem__(self, index: int) -> Field: ...

    @overload
    def __getitem__(self, index: slice) -> List[Field]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[Field, List[Field]]:
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldsArray):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"
