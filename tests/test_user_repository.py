import uuid

import pytest

from tests.conftest import make_user


async def test_create_and_lookup(repos):
    user = await repos.users.create(make_user("dana@example.com", name="Dana"))

    by_id = await repos.users.get(user.id)
    by_email = await repos.users.get_by_email("dana@example.com")

    assert by_id.id == by_email.id == user.id
    assert by_id.name == "Dana"
    assert by_id.role == "user"


async def test_missing_user(repos):
    assert await repos.users.get(uuid.uuid4()) is None
    assert await repos.users.get_by_email("nobody@example.com") is None
    assert await repos.users.email_exists("nobody@example.com") is False


async def test_duplicate_email_rejected(repos):
    await repos.users.create(make_user("dana@example.com"))

    assert await repos.users.email_exists("dana@example.com") is True
    with pytest.raises(ValueError):
        await repos.users.create(make_user("dana@example.com"))


async def test_update_name(repos):
    user = await repos.users.create(make_user("dana@example.com", name="Dana"))

    user.update_profile(name="Dana Scully")
    updated = await repos.users.update(user)

    assert updated.name == "Dana Scully"
    assert (await repos.users.get(user.id)).name == "Dana Scully"


async def test_update_missing_user(repos):
    assert await repos.users.update(make_user("ghost@example.com")) is None
