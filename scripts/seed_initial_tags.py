"""Seed the default tag set for a user with the service role key.

Runs outside the Streamlit runtime. It expects `SUPABASE_URL` and
`SUPABASE_SERVICE_ROLE_KEY` environment variables and should only be used for
trusted CLI/admin tasks.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from aikinote.services.tags import TagService  # noqa: E402
from aikinote.utils.supa import create_supabase_client  # noqa: E402


def _service_client():
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise RuntimeError(
            "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY before running admin commands."
        )
    return create_supabase_client(url, key)


def seed(user_ids, client=None) -> int:
    """Seed every user in ``user_ids``; returns the number of failures."""
    service = TagService(client if client is not None else _service_client())
    failures = 0
    for user_id in user_ids:
        result = service.initialize_user_tags(user_id)
        if not result.success:
            failures += 1
            print(f"{user_id}: failed ({result.error})")
        elif result.data:
            print(f"{user_id}: inserted {len(result.data)} tags")
        else:
            print(f"{user_id}: already has tags, skipped")
    return failures


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the initial AikiNote tag set")
    parser.add_argument("user_ids", nargs="+", help="User id(s) to seed")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    try:
        failures = seed(args.user_ids)
    except RuntimeError as exc:
        print(exc)
        return 2
    return 0 if failures == 0 else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
