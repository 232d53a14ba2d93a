from aikinote.modals import TrainingPageModals
from aikinote.models import PageDraft


def test_edit_dialog_carries_draft_until_closed():
    modals = TrainingPageModals()
    draft = PageDraft(title="t", content="c", page_id="p1")
    modals.open_edit(draft)
    assert modals.edit_open and modals.editing_page is draft
    modals.close_edit()
    assert not modals.edit_open and modals.editing_page is None


def test_delete_dialog_tracks_target():
    modals = TrainingPageModals()
    modals.open_delete("p9")
    assert modals.delete_open and modals.delete_target_id == "p9"
    modals.close_delete()
    assert modals.delete_target_id is None


def test_close_all_resets_every_dialog():
    modals = TrainingPageModals()
    modals.open_create()
    modals.open_tag_modal()
    modals.open_delete("x")
    modals.open_edit(PageDraft(page_id="y"))
    modals.close_all()
    assert modals == TrainingPageModals()
