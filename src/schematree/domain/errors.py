"""Exception hierarchy for schema building and chunk attribution.

Two failure classes exist:
- Fatal errors (raised): unsupported primitive widths, recursion with no
  struct or enum to break it, chunks arriving after the traversal is
  exhausted, attributor misuse.
- Silent degradation (never raised): unresolvable declarations become
  ``undefined`` nodes.
"""

from __future__ import annotations


class SchemaTreeError(Exception):
    """Base class for all schematree errors.

    Attributes:
        code: Stable machine-readable error code surfaced in ServiceError.
    """

    code = "SCHEMATREE_ERROR"


class DefinitionLoadError(SchemaTreeError):
    """The reflection document could not be read or validated."""

    code = "INVALID_DEFINITIONS"


class SchemaError(SchemaTreeError):
    """The definition map describes a type that cannot be represented."""

    code = "INVALID_SCHEMA"


class UnsupportedWidthError(SchemaError):
    """An integer or float declaration has an unsupported bit width."""

    code = "UNSUPPORTED_WIDTH"

    def __init__(self, declaration: str, byte_length: int) -> None:
        super().__init__(f"Unsupported width for {declaration!r} ({byte_length} bytes)")
        self.declaration = declaration
        self.byte_length = byte_length


class RecursiveTypeError(SchemaError):
    """A type contains itself without passing through a struct or enum.

    Only structs and enums are deduplicated into the side table, so a cycle
    made purely of tuple structs and wrappers has no finite tree form.
    """

    code = "RECURSIVE_TYPE"

    def __init__(self, cycle: tuple[str, ...]) -> None:
        super().__init__(f"Recursive type without a struct or enum: {' -> '.join(cycle)}")
        self.cycle = cycle


class AttributionError(SchemaTreeError):
    """Chunk attribution protocol violation."""

    code = "ATTRIBUTION_FAILED"


class NoPendingFieldError(AttributionError):
    """A chunk arrived but the traversal holds no further leaf."""

    code = "NO_PENDING_FIELD"


class AttributorInUseError(AttributionError):
    """An attributor was bound to more than one encode invocation."""

    code = "ATTRIBUTOR_IN_USE"


class IncompleteAttributionError(AttributionError):
    """The encode call finished while leaves were still expecting chunks."""

    code = "INCOMPLETE_ATTRIBUTION"


class EncodeError(SchemaTreeError):
    """A value does not match the declaration it is encoded against."""

    code = "ENCODE_FAILED"
