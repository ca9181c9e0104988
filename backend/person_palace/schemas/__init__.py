# Pydantic request/response schemas (API contract).

from person_palace.schemas.common import ErrorDetail, MessageResponse
from person_palace.schemas.person import (
    Person,
    PersonCreate,
    PersonListResponse,
    PersonUpdate,
)

__all__ = [
    "MessageResponse",
    "ErrorDetail",
    "Person",
    "PersonCreate",
    "PersonUpdate",
    "PersonListResponse",
]
