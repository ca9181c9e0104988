# Headless UI: persons table, form, delete prompt and the page that wires them.

from person_palace.ui.delete_confirm import DeleteConfirm
from person_palace.ui.form import (
    FieldError,
    PersonForm,
    PersonFormValues,
    PersonValidationError,
)
from person_palace.ui.notifier import LoggingNotifier, Notification, Notifier
from person_palace.ui.page import MissingIdentifierError, PageView, PersonPage
from person_palace.ui.query import Mutation, Query, QueryClient
from person_palace.ui.table import PersonTable, SortState, TableView, sort_persons

__all__ = [
    "DeleteConfirm",
    "FieldError",
    "PersonForm",
    "PersonFormValues",
    "PersonValidationError",
    "LoggingNotifier",
    "Notification",
    "Notifier",
    "MissingIdentifierError",
    "PageView",
    "PersonPage",
    "Mutation",
    "Query",
    "QueryClient",
    "PersonTable",
    "SortState",
    "TableView",
    "sort_persons",
]
