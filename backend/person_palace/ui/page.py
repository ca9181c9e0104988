"""
Persons page: wires the table, form and delete prompt to the persons backend.

Form:   Idle -> Open(create) | Open(edit, person) -> save -> Idle
Delete: Idle -> Confirming(person) -> Deleting -> Idle, or cancel -> Idle

Every successful mutation invalidates the "persons" query, which re-fetches the
whole list; nothing is patched locally. A save that completes after the user
closed (or re-opened) the form still refreshes the list and notifies, but only
closes the form if the session that issued it is still the current one.
"""

import logging

from pydantic import BaseModel

from person_palace.schemas.person import Person, PersonCreate, PersonUpdate
from person_palace.services.person_service import PersonService, RequestError
from person_palace.ui.delete_confirm import BODY, TITLE, DeleteConfirm
from person_palace.ui.form import (
    FieldError,
    FormMode,
    PersonForm,
    PersonFormValues,
    PersonValidationError,
)
from person_palace.ui.notifier import LoggingNotifier, Notification, Notifier
from person_palace.ui.query import Mutation, QueryClient
from person_palace.ui.table import PersonTable, SortState, TableView

logger = logging.getLogger(__name__)

PERSONS_QUERY_KEY = "persons"


class MissingIdentifierError(ValueError):
    """Delete requested for a record that has no usable identifier."""


class FormView(BaseModel):
    is_open: bool
    mode: FormMode
    values: PersonFormValues
    errors: dict[str, FieldError]
    submit_label: str
    inputs_enabled: bool


class ConfirmView(BaseModel):
    is_open: bool
    title: str
    body: str
    confirm_label: str
    controls_enabled: bool


class PageView(BaseModel):
    table: TableView
    form: FormView
    confirm: ConfirmView


def require_person_id(person: Person | None) -> str:
    person_id = getattr(person, "id", None)
    if not isinstance(person_id, str) or not person_id.strip():
        raise MissingIdentifierError("Cannot delete: person ID is missing.")
    return person_id


class PersonPage:
    def __init__(
        self,
        service: PersonService,
        notifier: Notifier | None = None,
        query_client: QueryClient | None = None,
    ) -> None:
        self._service = service
        self._notifier = notifier or LoggingNotifier()
        self.query_client = query_client or QueryClient()
        self.persons_query = self.query_client.query(PERSONS_QUERY_KEY, service.list_persons)
        self.table = PersonTable()
        self.form = PersonForm()
        self.confirm = DeleteConfirm()
        self.editing_person: Person | None = None
        self.deleting_person: Person | None = None
        self._save = Mutation(
            self._save_person,
            on_success=self._on_saved,
            on_error=self._on_save_failed,
            name="Save person",
        )
        self._remove = Mutation(
            self._service.delete_person,
            on_success=self._on_deleted,
            on_error=self._on_delete_failed,
            name="Delete person",
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def persons(self) -> list[Person]:
        return self.persons_query.data or []

    @property
    def is_saving(self) -> bool:
        return self._save.is_pending

    @property
    def is_deleting(self) -> bool:
        return self._remove.is_pending

    def _error(self, description: str) -> None:
        self._notifier.notify(
            Notification(title="Error", description=description, variant="destructive")
        )

    async def load(self) -> None:
        """Initial fetch of the persons list."""
        await self.persons_query.fetch()
        err = self.persons_query.error
        if err is not None:
            self._error(str(err) or "Failed to fetch persons")

    def toggle_sort(self, column: str) -> SortState:
        return self.table.toggle_sort(column)

    # -------------------------------------------------------------------------
    # Form
    # -------------------------------------------------------------------------

    def open_create(self) -> None:
        if self.form.is_open:
            self.close_form()
        self.editing_person = None
        self.form.open()

    def open_edit(self, person: Person) -> None:
        if self.form.is_open:
            self.close_form()
        self.editing_person = person
        self.form.open(person)

    def close_form(self) -> None:
        self.form.close()
        self.editing_person = None

    def _save_person(
        self,
        target: Person | None,
        payload: PersonCreate | PersonUpdate,
        session: int,
    ) -> Person:
        if target is not None:
            logger.info("Updating person with ID: %s", target.id)
            return self._service.update_person(target.id, payload)
        return self._service.create_person(payload)

    async def submit_form(self, values: PersonFormValues | None = None) -> Person | None:
        """
        Validate, then create or update depending on the form mode.
        Returns the saved record, or None when blocked or failed.
        """
        if self.is_saving:
            logger.warning("Save already in flight; ignoring submit")
            return None
        if not self.form.is_open:
            logger.warning("Form is not open; ignoring submit")
            return None
        try:
            payload = self.form.submit(values)
        except PersonValidationError as e:
            logger.debug("Form blocked: %s", e)
            return None
        self.form.busy = True
        try:
            return await self._save.mutate(self.editing_person, payload, self.form.session)
        finally:
            self.form.busy = False

    async def _on_saved(
        self,
        saved: Person,
        target: Person | None,
        payload: PersonCreate | PersonUpdate,
        session: int,
    ) -> None:
        if self.form.session == session and self.form.is_open:
            self.close_form()
        self._notifier.notify(
            Notification(title="Saved!", description="Person was successfully saved.")
        )
        await self.query_client.invalidate(PERSONS_QUERY_KEY)

    def _on_save_failed(
        self,
        err: RequestError,
        target: Person | None,
        payload: PersonCreate | PersonUpdate,
        session: int,
    ) -> None:
        logger.error("Save error: %s", err)
        self._error(err.message or "Failed to save person.")

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def request_delete(self, person: Person) -> None:
        if self.confirm.busy:
            logger.warning("Delete already in flight; ignoring request")
            return
        self.deleting_person = person
        self.confirm.open(person)

    def cancel_delete(self) -> None:
        if self.confirm.cancel():
            self.deleting_person = None

    async def confirm_delete(self) -> None:
        if self.is_deleting:
            logger.warning("Delete already in flight; ignoring confirm")
            return
        try:
            person_id = require_person_id(self.deleting_person)
        except MissingIdentifierError as e:
            logger.error(
                "Cannot delete: no valid id for person %r",
                getattr(self.deleting_person, "Name", None),
            )
            self._error(str(e))
            return
        logger.info("Deleting person with ID: %s", person_id)
        self.confirm.busy = True
        try:
            await self._remove.mutate(person_id)
        finally:
            self.confirm.busy = False

    async def _on_deleted(self, _: None, person_id: str) -> None:
        self.confirm.close()
        self.deleting_person = None
        self._notifier.notify(Notification(title="Deleted!", description="Person was removed."))
        await self.query_client.invalidate(PERSONS_QUERY_KEY)

    def _on_delete_failed(self, err: RequestError, person_id: str) -> None:
        logger.error("Delete error: %s", err)
        self._error(err.message or "Failed to delete person.")

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def view(self) -> PageView:
        return PageView(
            table=self.table.render(
                self.persons,
                loading=self.persons_query.is_loading,
                busy=self.is_saving or self.is_deleting,
            ),
            form=FormView(
                is_open=self.form.is_open,
                mode=self.form.mode,
                values=self.form.values,
                errors=self.form.errors,
                submit_label=self.form.submit_label,
                inputs_enabled=self.form.inputs_enabled,
            ),
            confirm=ConfirmView(
                is_open=self.confirm.is_open,
                title=TITLE,
                body=BODY,
                confirm_label=self.confirm.confirm_label,
                controls_enabled=self.confirm.controls_enabled,
            ),
        )
