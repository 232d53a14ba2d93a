import pytest

from aikinote.cache import QueryCache
from aikinote.models import UserProfile
from aikinote.result import Err, Ok
from aikinote.services.profile import ProfileService


@pytest.fixture
def service(fake_client):
    fake_client.db["User"] = [
        {
            "id": "u1",
            "email": "sensei@example.com",
            "username": "sensei",
            "profile_image_url": None,
            "dojo_style_name": "合気会",
            "training_start_date": "2015-04-01",
        }
    ]
    return ProfileService(fake_client, cache=QueryCache())


def test_get_profile(service):
    result = service.get_profile("u1")
    assert isinstance(result, Ok)
    profile = UserProfile.from_row(result.data)
    assert profile.username == "sensei"
    assert profile.dojo_style_name == "合気会"


def test_missing_user_is_an_error(service):
    assert service.get_profile("ghost") == Err("User not found")


def test_update_only_touches_given_fields(service, fake_client):
    result = service.update_profile("u1", dojo_style_name="  ")
    assert isinstance(result, Ok)
    row = fake_client.db["User"][0]
    assert row["dojo_style_name"] is None
    assert row["username"] == "sensei"
    assert row["training_start_date"] == "2015-04-01"


def test_username_cannot_be_blank(service, fake_client):
    result = service.update_profile("u1", username=" ")
    assert result == Err("username is required")
    assert fake_client.db["User"][0]["username"] == "sensei"


def test_update_invalidates_cached_profile(service):
    assert service.get_profile("u1").data["username"] == "sensei"
    service.update_profile("u1", username="shihan")
    assert service.get_profile("u1").data["username"] == "shihan"


def test_empty_patch_returns_current_row(service, fake_client):
    result = service.update_profile("u1")
    assert result.data["username"] == "sensei"
    assert fake_client.count("User", "update") == 0
