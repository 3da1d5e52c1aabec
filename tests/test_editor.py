import pytest

from utils.editor import CollectionEditor, EditorState, EditorStateError
from utils.fallback_store import FallbackStore, NotFoundError
from utils.storage import MemoryJsonStore
from utils.validation import ValidationFailure, validate_product, validate_timeline_item, validate_email, slugify


@pytest.fixture
def editor():
    store = FallbackStore("books", local=MemoryJsonStore(), id_prefix="book")
    return CollectionEditor(store, validator=validate_product, label="Product")


def test_create_flow_returns_to_idle_with_toast(editor):
    editor.open_create({"product_type": "book"})
    assert editor.state is EditorState.EDITING
    saved = editor.submit({"title": "Naruto", "category": "Manga", "price": 9.99})
    assert editor.state is EditorState.IDLE
    assert saved["product_type"] == "book"
    assert editor.last_toast == {"title": "Success", "description": "Product created successfully", "variant": "default"}
    assert editor.records() == [saved]


def test_zero_price_is_rejected_and_nothing_is_stored(editor):
    editor.open_create()
    with pytest.raises(ValidationFailure) as err:
        editor.submit({"title": "Free", "category": "Manga", "price": 0})
    assert err.value.message == "Price must be greater than 0"
    assert editor.state is EditorState.EDITING
    assert editor.error == "Price must be greater than 0"
    assert editor.form["title"] == "Free"
    assert editor.last_toast["variant"] == "destructive"
    assert editor.records() == []

    # fixing the field and resubmitting succeeds
    editor.submit({"price": 1.5})
    assert editor.state is EditorState.IDLE
    assert len(editor.records()) == 1


def test_edit_flow_updates_record(editor):
    editor.open_create()
    saved = editor.submit({"title": "Old", "category": "Manga", "price": 2})
    form = editor.open_edit(saved["id"])
    assert form["title"] == "Old"
    updated = editor.submit({"title": "New"})
    assert updated["title"] == "New"
    assert editor.last_toast["description"] == "Product updated successfully"


def test_edit_of_vanished_record_keeps_form(editor):
    editor.open_create()
    saved = editor.submit({"title": "Gone", "category": "Manga", "price": 2})
    editor.open_edit(saved["id"])
    editor.store.delete(saved["id"])
    with pytest.raises(NotFoundError):
        editor.submit({"title": "Still editing"})
    assert editor.state is EditorState.EDITING
    assert editor.error == "Product no longer exists"
    assert editor.form["title"] == "Still editing"


def test_open_edit_unknown_id(editor):
    with pytest.raises(NotFoundError):
        editor.open_edit("nope")
    assert editor.state is EditorState.IDLE


def test_cancel_discards_form(editor):
    editor.open_create({"title": "Draft"})
    editor.cancel()
    assert editor.state is EditorState.IDLE
    assert editor.form == {}


def test_illegal_transitions(editor):
    with pytest.raises(EditorStateError):
        editor.submit({"title": "x"})
    with pytest.raises(EditorStateError):
        editor.cancel()
    editor.open_create()
    with pytest.raises(EditorStateError):
        editor.delete("anything")


def test_delete_sets_toast(editor):
    editor.open_create()
    saved = editor.submit({"title": "Bye", "category": "Manga", "price": 3})
    editor.delete(saved["id"])
    assert editor.last_toast["description"] == "Product deleted successfully"
    with pytest.raises(NotFoundError):
        editor.delete(saved["id"])
    assert editor.last_toast["title"] == "Error"


def test_before_save_hook_can_reject(editor):
    def no_duplicates(values, record_id):
        raise ValidationFailure("Duplicate", field="title")

    editor.before_save = no_duplicates
    editor.open_create()
    with pytest.raises(ValidationFailure):
        editor.submit({"title": "Dup", "category": "Manga", "price": 1})
    assert editor.state is EditorState.EDITING
    assert editor.records() == []


def test_store_error_returns_to_editing(editor, monkeypatch):
    def broken_create(values):
        raise RuntimeError("disk full")

    monkeypatch.setattr(editor.store, "create", broken_create)
    editor.open_create()
    with pytest.raises(RuntimeError):
        editor.submit({"title": "Kept", "category": "Manga", "price": 4})
    assert editor.state is EditorState.EDITING
    assert editor.error == "Failed to save product"
    assert editor.last_toast["variant"] == "destructive"
    assert editor.form["title"] == "Kept"

    monkeypatch.undo()
    editor.submit()
    assert editor.state is EditorState.IDLE
    assert len(editor.records()) == 1


# ---- validators ----

@pytest.mark.parametrize("values,message", [
    ({"category": "Manga", "price": 1}, "Title is required"),
    ({"title": "  ", "category": "Manga", "price": 1}, "Title is required"),
    ({"title": "A", "category": "Manga", "price": "abc"}, "Price must be greater than 0"),
    ({"title": "A", "category": "Manga", "price": 1, "section_type": "bargain-bin"},
     "Section must be one of: new-releases, best-sellers, leaving-soon, featured, trending"),
    ({"title": "A", "category": "Manga", "price": 1, "parent_id": "p", "volume_number": 0},
     "Volume number must be 1 or greater"),
])
def test_validate_product_rejections(values, message):
    assert validate_product(values) == (False, message)


def test_timeline_year_bounds():
    assert validate_timeline_item({"header": "Founded", "year": 1999})[0]
    assert not validate_timeline_item({"header": "Founded", "year": 1899})[0]
    assert not validate_timeline_item({"header": "Founded", "year": 2101})[0]


def test_email_and_slug_helpers():
    assert validate_email(" Reader@Example.com ") == (True, "")
    assert validate_email("nope")[0] is False
    assert slugify("Attack on Titan!") == "attack-on-titan"
    assert slugify("???") == "series"
