"""Required-field validation for entity records.

Entity records are plain dataclasses whose fields are annotated with the
constraint types below. The records themselves can be built in any state
(an empty ``Review()`` is fine); the rules are only enforced when a service
hands the record to :class:`Validator` before saving it.
"""

import dataclasses
import logging
import threading
from typing import Annotated, Any, Dict
from uuid import UUID

from pydantic import AfterValidator, HttpUrl, StringConstraints, TypeAdapter, ValidationError

from incident_reviewer.errors import EntityValidationError, FieldError
from incident_reviewer.ids import is_nil

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(HttpUrl)


def _require_id(value: UUID) -> UUID:
    if is_nil(value):
        raise ValueError("identifier is required")
    return value


def _require_absolute_url(value: str) -> str:
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise ValueError("must be an absolute http(s) URL")
    return value


# Column sizes of the relational backend; every backend enforces them
NAME_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100
URL_MAX_LENGTH = 2048

# Constraint types used in entity annotations
RequiredStr = Annotated[str, StringConstraints(min_length=1)]
RequiredName = Annotated[str, StringConstraints(min_length=1, max_length=NAME_MAX_LENGTH)]
RequiredCategory = Annotated[str, StringConstraints(min_length=1, max_length=CATEGORY_MAX_LENGTH)]
RequiredID = Annotated[UUID, AfterValidator(_require_id)]
AbsoluteURL = Annotated[
    str,
    StringConstraints(min_length=1, max_length=URL_MAX_LENGTH),
    AfterValidator(_require_absolute_url),
]


class Validator:
    """Validates entity records against the constraints in their annotations.

    One instance is built when the application starts and shared by every
    service. It only caches schemas, so concurrent use is safe.
    """

    def __init__(self) -> None:
        self._adapters: Dict[type, TypeAdapter] = {}
        self._lock = threading.Lock()

    def _adapter_for(self, record_type: type) -> TypeAdapter:
        adapter = self._adapters.get(record_type)
        if adapter is None:
            with self._lock:
                adapter = self._adapters.get(record_type)
                if adapter is None:
                    logger.debug(f"Building validation schema for {record_type.__name__}")
                    adapter = TypeAdapter(record_type)
                    self._adapters[record_type] = adapter
        return adapter

    def validate(self, record: Any) -> None:
        """Validate a dataclass record.

        Raises:
            EntityValidationError: listing every failing field.
        """
        if not dataclasses.is_dataclass(record) or isinstance(record, type):
            raise TypeError(f"expected a dataclass instance, got {type(record)!r}")

        kind = getattr(record, "KIND", type(record).__name__.lower())
        try:
            self._adapter_for(type(record)).validate_python(dataclasses.asdict(record))
        except ValidationError as e:
            field_errors = [
                FieldError(
                    field=".".join(str(part) for part in err["loc"]) or "__root__",
                    message=err["msg"],
                )
                for err in e.errors()
            ]
            raise EntityValidationError(kind, field_errors) from e
