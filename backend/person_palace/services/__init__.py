# Services: persons REST backend

from person_palace.services.person_service import (
    PersonService,
    RequestError,
    get_person_service,
)

__all__ = [
    "PersonService",
    "RequestError",
    "get_person_service",
]
