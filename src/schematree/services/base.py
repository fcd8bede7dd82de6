"""BaseService — shared foundation for schematree services.

Every service receives a :class:`SchemaSource` at construction time. The
source owns the reflection container and the lazily built schema and
graph; services only read them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from schematree.services.result import ServiceResult

if TYPE_CHECKING:
    from schematree.domain.errors import SchemaTreeError
    from schematree.infrastructure.source import SchemaSource

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class SchemaService(BaseService):
            def build_schema(self) -> ServiceResult:
                schema = self._source.schema
                ...
    """

    def __init__(self, source: SchemaSource) -> None:
        self._source = source

    @staticmethod
    def _error_result(op: str, exc: SchemaTreeError) -> ServiceResult:
        """Convert a domain exception into a failed ServiceResult."""
        logger.debug("%s failed: %s", op, exc, exc_info=True)
        return ServiceResult.failure(op, exc.code, str(exc), error_type=type(exc).__name__)
