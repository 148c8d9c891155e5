"""Filter operators and the ``Condition`` model.

A ``Condition`` is one column/operator/value predicate.  Both the SQL
compiler and the HTTP compiler consume the same model, each with its own
rendering table keyed on :class:`FilterOp`.

Usage::

    from ledgerql.schema.conditions import Condition, FilterOp

    cond = Condition(column="status", operator=FilterOp.IN, value=["sent", "paid"])
    assert cond.values == ("sent", "paid")
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ledgerql.errors import InvalidFilterError


class FilterOp(str, Enum):
    """Filter operators accepted by the fluent builder.

    The value doubles as the operator name used by the HTTP query-string
    encoding (``column__<value>=...``).
    """

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    LIKE = "like"
    ILIKE = "ilike"
    IS = "is"
    IS_NOT = "is_not"
    IN = "in"
    NOT = "not"


#: Operators that cannot appear inside ``NOT``.
_NOT_NESTABLE: frozenset[FilterOp] = frozenset({FilterOp.NOT, FilterOp.IS_NOT})

#: Values that ``IS`` / ``IS NOT`` can compare against.
IS_LITERALS: tuple[Any, ...] = (None, True, False)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


class Condition(BaseModel):
    """A single filter predicate.

    Attributes:
        column: Unquoted column name.
        operator: The filter operator.
        value: The comparison value.  A tuple for ``IN`` (a list is copied
            into one); ``None``, ``True`` or ``False`` for ``IS`` / ``IS_NOT``.
        negated: For ``operator=NOT`` only, the operator being negated.

    Raises:
        InvalidFilterError: If the value shape does not fit the operator.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    column: str
    operator: FilterOp
    value: Any = None
    negated: FilterOp | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _freeze_sequence(cls, value: Any) -> Any:
        if _is_sequence(value):
            return tuple(value)
        return value

    @model_validator(mode="after")
    def _check_value_shape(self) -> Condition:
        effective = self.operator
        if self.operator is FilterOp.NOT:
            if self.negated is None or self.negated in _NOT_NESTABLE:
                raise InvalidFilterError(
                    f"NOT requires a negatable operator, got {self.negated!r}.",
                    column=self.column,
                    operator=self.operator.value,
                )
            effective = self.negated
        elif self.negated is not None:
            raise InvalidFilterError(
                "Only NOT conditions carry a negated operator.",
                column=self.column,
                operator=self.operator.value,
            )

        if effective is FilterOp.IN and not _is_sequence(self.value):
            raise InvalidFilterError(
                f"IN requires a list of values, got {type(self.value).__name__}.",
                column=self.column,
                operator=effective.value,
            )
        if effective in (FilterOp.IS, FilterOp.IS_NOT) and not any(
            self.value is literal for literal in IS_LITERALS
        ):
            raise InvalidFilterError(
                f"IS accepts only None, True or False, got {self.value!r}.",
                column=self.column,
                operator=effective.value,
            )
        return self

    @property
    def values(self) -> tuple[Any, ...]:
        """The ``IN`` values (empty for scalar operators)."""
        return self.value if isinstance(self.value, tuple) else ()
