"""
Yes/no gate in front of an irreversible delete.
"""

from person_palace.schemas.person import Person

TITLE = "Delete this person?"
BODY = "This action cannot be undone."


class DeleteConfirm:
    """closed -> open(person) -> cancel | confirm. The page performs the delete call."""

    def __init__(self) -> None:
        self.is_open = False
        self.person: Person | None = None
        self.busy = False

    @property
    def controls_enabled(self) -> bool:
        return not self.busy

    @property
    def confirm_label(self) -> str:
        return "Deleting..." if self.busy else "Delete"

    def open(self, person: Person) -> None:
        self.person = person
        self.is_open = True

    def cancel(self) -> bool:
        """Close without deleting. Ignored while a delete is in flight."""
        if self.busy:
            return False
        self.close()
        return True

    def close(self) -> None:
        self.is_open = False
        self.person = None
