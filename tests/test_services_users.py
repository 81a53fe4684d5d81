"""Tests for the credential store."""

import asyncio
import time

import pytest
from sqlalchemy import func, select

from devclimate.database import User
from devclimate.errors import DuplicateUser
from devclimate.services.users import CredentialStore


def run_with_store(database, body, bcrypt_rounds: int = 4):
    """Run `body(store)` against a fresh schema."""

    async def run():
        await database.connect(create_tables=True)
        try:
            async with database.session() as session:
                return await body(CredentialStore(session, bcrypt_rounds=bcrypt_rounds))
        finally:
            await database.close()

    return asyncio.run(run())


class TestRegistrationRace:
    """A registration that passes the pre-insert check can still collide."""

    @pytest.fixture(autouse=True)
    def skip_precheck(self, monkeypatch):
        async def no_match(self, email, username):
            return None

        monkeypatch.setattr(CredentialStore, "find_by_email_or_username", no_match)

    def test_unique_constraint_raises_duplicate(self, database):
        async def body(store: CredentialStore):
            first = await store.register_user("alice", "a@x.com", "secret1")
            first_id = first.id

            with pytest.raises(DuplicateUser):
                await store.register_user("alice", "other@x.com", "secret1")
            with pytest.raises(DuplicateUser):
                await store.register_user("alice2", "a@x.com", "secret1")

            # Session is usable after the rollback
            user = await store.authenticate("a@x.com", "secret1")
            count = await store.session.scalar(select(func.count()).select_from(User))
            return first_id, user.id, count

        first_id, user_id, count = run_with_store(database, body)
        assert user_id == first_id
        assert count == 1


class TestEventLoop:
    def test_hashing_does_not_block_the_loop(self, database):
        async def body(store: CredentialStore) -> float:
            gaps: list[float] = []
            done = asyncio.Event()

            async def ticker():
                last = time.perf_counter()
                while not done.is_set():
                    await asyncio.sleep(0.005)
                    now = time.perf_counter()
                    gaps.append(now - last)
                    last = now

            task = asyncio.create_task(ticker())
            await store.register_user("alice", "a@x.com", "secret1")
            await store.authenticate("a@x.com", "secret1")
            done.set()
            await task
            return max(gaps)

        # Cost 12 takes a few hundred milliseconds per hash
        assert run_with_store(database, body, bcrypt_rounds=12) < 0.1


class TestAuthenticate:
    def test_email_is_normalized(self, database):
        async def body(store: CredentialStore):
            await store.register_user("alice", "  a@x.com ", "secret1")
            padded = await store.authenticate(" a@x.com  ", "secret1")
            plain = await store.authenticate("a@x.com", "secret1")
            return padded.email, plain.email

        assert run_with_store(database, body) == ("a@x.com", "a@x.com")
