"""Domain primitives: scalar aliases shared by resources and items."""

from __future__ import annotations

type Scalar = str | int | float | bool
type FieldValue = Scalar | tuple[str, ...] | None
type IdentityValue = str | int
type IdentityKey = tuple[IdentityValue, ...]
type LogicalId = str
