"""User-facing fallback messages for the sync layer and views."""
from __future__ import annotations

DEFAULT_LOCALE = "ja"

MESSAGES = {
    "ja": {
        "data_fetch_failed": "データの取得に失敗しました",
        "login_required": "ログインが必要です",
        "page_create_failed": "ページの作成に失敗しました",
        "page_update_failed": "ページの更新に失敗しました",
        "page_delete_failed": "ページの削除に失敗しました",
        "page_created": "ページを作成しました",
        "page_updated": "ページを更新しました",
        "page_deleted": "ページを削除しました",
        "tag_fetch_failed": "タグ一覧の取得に失敗しました",
        "profile_fetch_failed": "ユーザープロフィールの取得に失敗しました",
    },
    "en": {
        "data_fetch_failed": "Failed to load data",
        "login_required": "Please sign in",
        "page_create_failed": "Failed to create the page",
        "page_update_failed": "Failed to update the page",
        "page_delete_failed": "Failed to delete the page",
        "page_created": "Page created",
        "page_updated": "Page updated",
        "page_deleted": "Page deleted",
        "tag_fetch_failed": "Failed to load tags",
        "profile_fetch_failed": "Failed to load the user profile",
    },
}


def message(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Look up ``key`` for ``locale``; unknown locales use Japanese."""
    catalog = MESSAGES.get(locale) or MESSAGES[DEFAULT_LOCALE]
    return catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)


__all__ = ["DEFAULT_LOCALE", "MESSAGES", "message"]
