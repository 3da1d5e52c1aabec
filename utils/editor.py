"""
Form-backed editor over one collection.

    IDLE --open_create/open_edit--> EDITING --submit--> SUBMITTING
    SUBMITTING --saved--> IDLE
    SUBMITTING --rejected--> EDITING (error set, form values kept)
    EDITING --cancel--> IDLE

Every finished action leaves a toast on the editor for the caller to show.
"""
from enum import Enum
from typing import Callable, Optional, Tuple

from core.config import logger
from utils.fallback_store import FallbackStore, NotFoundError
from utils.validation import ValidationFailure

Validator = Callable[[dict], Tuple[bool, str]]


class EditorState(Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"


class EditorStateError(Exception):
    pass


def toast(title: str, description: str = "", variant: str = "default") -> dict:
    return {"title": title, "description": description, "variant": variant}


class CollectionEditor:
    def __init__(
        self,
        store: FallbackStore,
        validator: Optional[Validator] = None,
        label: str = "Item",
        before_save: Optional[Callable[[dict, Optional[str]], dict]] = None,
    ):
        self.store = store
        self.validator = validator
        self.label = label
        self.before_save = before_save
        self.state = EditorState.IDLE
        self.form: dict = {}
        self.editing_id: Optional[str] = None
        self.error: Optional[str] = None
        self.last_toast: Optional[dict] = None

    def _expect(self, *states: EditorState):
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise EditorStateError(f"{self.label} editor is {self.state.value}, expected {allowed}")

    def records(self, active_only: bool = False) -> list:
        return self.store.load(active_only=active_only)

    def open_create(self, defaults: Optional[dict] = None) -> dict:
        self._expect(EditorState.IDLE, EditorState.EDITING)
        self.form = dict(defaults or {})
        self.editing_id = None
        self.error = None
        self.state = EditorState.EDITING
        return self.form

    def open_edit(self, record_id: str) -> dict:
        self._expect(EditorState.IDLE, EditorState.EDITING)
        record = self.store.get(record_id)
        if record is None:
            raise NotFoundError(self.store.collection, record_id)
        self.form = dict(record)
        self.editing_id = str(record_id)
        self.error = None
        self.state = EditorState.EDITING
        return self.form

    def cancel(self) -> None:
        self._expect(EditorState.EDITING)
        self.form = {}
        self.editing_id = None
        self.error = None
        self.state = EditorState.IDLE

    def _reject(self, message: str):
        self.state = EditorState.EDITING
        self.error = message
        self.last_toast = toast("Error", message, "destructive")

    def submit(self, values: Optional[dict] = None) -> dict:
        """Validate and save the form. Any failure is re-raised with the editor
        back in EDITING and the form values intact."""
        self._expect(EditorState.EDITING)
        if values:
            self.form.update(values)
        self.state = EditorState.SUBMITTING

        payload = dict(self.form)
        try:
            if self.validator is not None:
                ok, message = self.validator(payload)
                if not ok:
                    raise ValidationFailure(message)
            if self.before_save is not None:
                payload = self.before_save(payload, self.editing_id)
            if self.editing_id is None:
                saved = self.store.create(payload)
                verb = "created"
            else:
                saved = self.store.update(self.editing_id, payload)
                verb = "updated"
        except ValidationFailure as ex:
            self._reject(ex.message)
            raise
        except NotFoundError as ex:
            self._reject(f"{self.label} no longer exists")
            logger.warning(f"[editor] {ex}")
            raise
        except Exception as ex:
            self._reject(f"Failed to save {self.label.lower()}")
            logger.error(f"[editor] saving {self.label} failed: {ex}")
            raise

        self.state = EditorState.IDLE
        self.form = {}
        self.editing_id = None
        self.error = None
        self.last_toast = toast("Success", f"{self.label} {verb} successfully")
        return saved

    def delete(self, record_id: str) -> None:
        self._expect(EditorState.IDLE)
        try:
            self.store.delete(record_id)
        except NotFoundError:
            self.last_toast = toast("Error", f"{self.label} not found", "destructive")
            raise
        self.last_toast = toast("Success", f"{self.label} deleted successfully")
