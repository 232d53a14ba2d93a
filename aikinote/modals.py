"""Open/closed state of the dialogs on the personal pages view."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from aikinote.models import PageDraft


@dataclass
class TrainingPageModals:
    create_open: bool = False
    edit_open: bool = False
    editing_page: Optional[PageDraft] = None
    delete_open: bool = False
    delete_target_id: Optional[str] = None
    tag_modal_open: bool = False

    def open_create(self) -> None:
        self.create_open = True

    def close_create(self) -> None:
        self.create_open = False

    def open_edit(self, draft: PageDraft) -> None:
        self.editing_page = draft
        self.edit_open = True

    def close_edit(self) -> None:
        self.edit_open = False
        self.editing_page = None

    def open_delete(self, page_id: str) -> None:
        self.delete_target_id = page_id
        self.delete_open = True

    def close_delete(self) -> None:
        self.delete_open = False
        self.delete_target_id = None

    def open_tag_modal(self) -> None:
        self.tag_modal_open = True

    def close_tag_modal(self) -> None:
        self.tag_modal_open = False

    def close_all(self) -> None:
        self.close_create()
        self.close_edit()
        self.close_delete()
        self.close_tag_modal()


__all__ = ["TrainingPageModals"]
