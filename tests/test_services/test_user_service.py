"""Tests for registration, sign-in and profile updates."""

import pytest

from filevault.core.security import verify_password
from filevault.exceptions import Conflict, NotFound, Unauthorized
from filevault.services.seed import DEMO_USERS, seed_demo_users


async def test_register_hashes_password(user_service):
    user = await user_service.register('carol', 'carol@z.com', 'secret99')

    assert user.id
    assert user.hashed_password != 'secret99'
    assert verify_password('secret99', user.hashed_password)


async def test_register_rejects_duplicates(user_service, alice):
    with pytest.raises(Conflict, match='Username'):
        await user_service.register('alice', 'other@x.com', 'pw123456')
    with pytest.raises(Conflict, match='Email'):
        await user_service.register('alice2', 'alice@x.com', 'pw123456')


async def test_usernames_are_case_sensitive(user_service, alice):
    user = await user_service.register('Alice', 'alice2@x.com', 'pw123456')

    assert user.id != alice.id


async def test_authenticate_by_username_or_email(user_service, alice):
    assert (await user_service.authenticate('alice', 'pw123456')).id == alice.id
    assert (await user_service.authenticate('alice@x.com', 'pw123456')).id == alice.id


@pytest.mark.parametrize(
    ('principal', 'password'),
    [('alice', 'wrong-password'), ('nobody', 'pw123456'), ('nobody@x.com', 'pw123456')],
)
async def test_authenticate_failures_look_alike(user_service, alice, principal, password):
    with pytest.raises(Unauthorized, match='Invalid username or password'):
        await user_service.authenticate(principal, password)


async def test_get_unknown_user(user_service):
    with pytest.raises(NotFound):
        await user_service.get('missing')


async def test_update_profile(user_service, alice, bob):
    updated = await user_service.update_profile(alice.id, username='alicia', email='alice@x.com')

    assert updated.username == 'alicia'
    assert updated.email == 'alice@x.com'

    with pytest.raises(Conflict):
        await user_service.update_profile(alice.id, username='bob')
    with pytest.raises(Conflict):
        await user_service.update_profile(alice.id, email='bob@y.com')


async def test_seed_demo_users_is_idempotent(session, user_service):
    assert await seed_demo_users(session) == len(DEMO_USERS)
    assert await seed_demo_users(session) == 0

    assert (await user_service.authenticate('demo@cloudvault.com', 'demo')).username == 'demo'
