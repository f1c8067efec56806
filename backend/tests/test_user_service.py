from __future__ import annotations

import pytest

from app.core.exceptions import Conflict
from app.schemas.user import UserCreate, UserUpdate
from app.services.user_service import (
    create_user,
    delete_user,
    get_user,
    get_user_by_email,
    get_user_by_provider_id,
    update_user,
)


def test_user_store_round_trip(db) -> None:
    user = create_user(db, UserCreate(email="a@x.com", provider="clerk", provider_id="user_1", last_name="Lovelace"))

    assert get_user(db, user.id).email == "a@x.com"
    assert get_user_by_email(db, "a@x.com").id == user.id
    assert get_user_by_provider_id(db, "user_1").id == user.id
    assert get_user_by_provider_id(db, "user_2") is None

    updated = update_user(db, user, UserUpdate(first_name="Ada"))
    assert updated.first_name == "Ada"
    assert updated.last_name == "Lovelace"

    delete_user(db, updated)
    assert get_user(db, user.id) is None


def test_update_to_taken_email_conflicts(db) -> None:
    create_user(db, UserCreate(email="a@x.com", provider="clerk", provider_id="user_1"))
    other = create_user(db, UserCreate(email="b@x.com", provider="clerk", provider_id="user_2"))

    with pytest.raises(Conflict):
        update_user(db, other, UserUpdate(email="a@x.com"))
