"""In-memory training page list kept in step with the backend.

The store owns the list shown on the personal pages view. Reads go through
:meth:`TrainingPagesStore.fetch_all`; writes go to the backend first and the
list is patched only after a successful response. Every operation reports
failures through the injected ``notify`` callback and returns ``True`` /
``False`` instead of raising.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Protocol, Tuple

from aikinote.config import FETCH_BATCH_SIZE
from aikinote.messages import DEFAULT_LOCALE, message
from aikinote.models import PageDraft, TrainingPageRecord
from aikinote.result import BackendError, Ok, Result, unwrap
from aikinote.time_utils import DEFAULT_TZ

__all__ = ["PagesBackend", "TrainingPagesStore"]


class PagesBackend(Protocol):
    def get_pages(
        self,
        user_id: str,
        *,
        limit: int = ...,
        offset: int = ...,
        query: str = ...,
        tags: Any = ...,
        date: Optional[str] = ...,
    ) -> Result[Dict[str, Any]]: ...

    def create_page(self, payload: Mapping[str, Any]) -> Result[Dict[str, Any]]: ...

    def update_page(self, payload: Mapping[str, Any]) -> Result[Dict[str, Any]]: ...

    def delete_page(self, page_id: str, user_id: str) -> Result[bool]: ...


def _console_notify(text: str) -> None:
    print(f"[alert] {text}")


class TrainingPagesStore:
    def __init__(
        self,
        backend: PagesBackend,
        *,
        notify: Callable[[str], None] = _console_notify,
        locale: str = DEFAULT_LOCALE,
        timezone: str = DEFAULT_TZ,
        batch_size: int = FETCH_BATCH_SIZE,
    ) -> None:
        self.backend = backend
        self.notify = notify
        self.locale = locale
        self.timezone = timezone
        self.batch_size = batch_size
        self.loading = False
        self._pages: List[TrainingPageRecord] = []
        self._lock = threading.Lock()
        self._in_flight: set = set()
        self._generation = 0

    @property
    def pages(self) -> List[TrainingPageRecord]:
        return list(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def get(self, page_id: str) -> Optional[TrainingPageRecord]:
        return next((page for page in self._pages if page.id == page_id), None)

    def close(self) -> None:
        """Forget the list and discard the result of any fetch still running."""
        with self._lock:
            self._generation += 1
            self._pages = []
            self.loading = False

    # ----------------------------- reads ------------------------------ #

    def fetch_all(self, user_id: Optional[str]) -> bool:
        """Load every page of ``user_id`` in batches.

        Any failure empties the list rather than exposing a partial result.
        """
        if not user_id:
            self.loading = False
            return False

        with self._claim(("fetch", user_id)) as claimed:
            if not claimed:
                return False
            with self._lock:
                generation = self._generation
            self.loading = True
            error = ""
            try:
                pages = self._fetch_batches(user_id)
            except Exception as exc:  # fail closed
                pages = None
                error = str(exc) or message("data_fetch_failed", self.locale)
            with self._lock:
                if generation != self._generation:
                    print("[sync] Discarding stale training page fetch")
                    return False
                self._pages = pages or []
                self.loading = False
            if pages is None:
                return self._fail("fetch", error)
            return True

    def _fetch_batches(self, user_id: str) -> List[TrainingPageRecord]:
        fallback = message("data_fetch_failed", self.locale)
        collected: List[TrainingPageRecord] = []
        offset = 0
        while True:
            result = self.backend.get_pages(
                user_id,
                limit=self.batch_size,
                offset=offset,
                query="",
                tags=[],
                date=None,
            )
            data = unwrap(result, fallback)
            if not data:
                raise BackendError(fallback)
            batch = [
                TrainingPageRecord.from_page_with_tags(item, self.timezone)
                for item in data.get("training_pages") or []
            ]
            collected.extend(batch)
            if len(batch) != self.batch_size:
                return collected
            offset += self.batch_size

    # ---------------------------- writes ------------------------------ #

    def create(self, draft: PageDraft, user_id: Optional[str]) -> bool:
        fallback = message("page_create_failed", self.locale)
        if not user_id:
            return self._fail("create", message("login_required", self.locale))

        with self._claim(("create", user_id)) as claimed:
            if not claimed:
                return False
            try:
                result = self.backend.create_page(draft.to_create_payload(user_id))
                record = self._record(result)
            except Exception as exc:
                return self._fail("create", str(exc) or fallback)
            if record is None:
                return self._fail("create", getattr(result, "error", "") or fallback)
            with self._lock:
                self._pages = [record] + [page for page in self._pages if page.id != record.id]
            return True

    def update(self, payload: Mapping[str, Any]) -> bool:
        fallback = message("page_update_failed", self.locale)
        page_id = str(payload.get("id") or "")

        with self._claim(("update", page_id)) as claimed:
            if not claimed:
                return False
            try:
                result = self.backend.update_page(payload)
                record = self._record(result)
            except Exception as exc:
                return self._fail("update", str(exc) or fallback)
            if record is None:
                return self._fail("update", getattr(result, "error", "") or fallback)
            with self._lock:
                self._pages = [record if page.id == record.id else page for page in self._pages]
            return True

    def remove(self, page_id: str, user_id: Optional[str]) -> bool:
        fallback = message("page_delete_failed", self.locale)
        if not user_id:
            return self._fail("remove", message("login_required", self.locale))

        with self._claim(("remove", page_id)) as claimed:
            if not claimed:
                return False
            try:
                result = self.backend.delete_page(page_id, user_id)
            except Exception as exc:
                return self._fail("remove", str(exc) or fallback)
            if not isinstance(result, Ok):
                return self._fail("remove", getattr(result, "error", "") or fallback)
            with self._lock:
                self._pages = [page for page in self._pages if page.id != page_id]
            return True

    # --------------------------- internals ---------------------------- #

    def _record(self, result: Result[Dict[str, Any]]) -> Optional[TrainingPageRecord]:
        if not isinstance(result, Ok) or not result.data:
            return None
        return TrainingPageRecord.from_page_with_tags(result.data, self.timezone)

    @contextmanager
    def _claim(self, key: Tuple[str, str]) -> Iterator[bool]:
        """Mark ``key`` as in flight; yields ``False`` if it already is."""
        with self._lock:
            if key in self._in_flight:
                print(f"[sync] Ignoring duplicate {key[0]} request for {key[1]}")
                claimed = False
            else:
                self._in_flight.add(key)
                claimed = True
        try:
            yield claimed
        finally:
            if claimed:
                with self._lock:
                    self._in_flight.discard(key)

    def _fail(self, operation: str, text: str) -> bool:
        print(f"[sync] {operation} failed: {text}")
        self.notify(text)
        return False
