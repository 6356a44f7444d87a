"""Tests for the cache reducers and UserCache."""

import pytest

from userpanel.common import Profile, Role, User
from userpanel.panel import (
    DuplicateUserError,
    UserCache,
    fold_deletion,
    fold_role_binding,
)


@pytest.fixture
def three_users() -> list[User]:
    return [
        User(id="1", email="a@x"),
        User(id="2", email="b@x", role=Role(name="member")),
        User(id="3", email="c@x", profile=Profile(nickname="Cee")),
    ]


class TestFoldRoleBinding:
    """Test suite for fold_role_binding."""

    def test_binds_user_without_role(self, three_users: list[User]) -> None:
        folded = fold_role_binding(three_users, "1", "admin")

        assert folded[0].role is not None
        assert folded[0].role.name == "admin"
        assert folded[0].email == "a@x"

    def test_replaces_existing_role(self, three_users: list[User]) -> None:
        folded = fold_role_binding(three_users, "2", "admin")

        assert folded[1].role == Role(name="admin")

    def test_other_entries_are_untouched(self, three_users: list[User]) -> None:
        folded = fold_role_binding(three_users, "2", "admin")

        assert len(folded) == len(three_users)
        assert folded[0] is three_users[0]
        assert folded[2] is three_users[2]

    def test_input_is_not_mutated(self, three_users: list[User]) -> None:
        before = [user.model_copy() for user in three_users]

        fold_role_binding(three_users, "2", "admin")

        assert three_users == before

    def test_is_idempotent(self, three_users: list[User]) -> None:
        once = fold_role_binding(three_users, "1", "admin")
        twice = fold_role_binding(once, "1", "admin")

        assert once == twice

    def test_unknown_id_changes_nothing(self, three_users: list[User]) -> None:
        assert fold_role_binding(three_users, "9", "admin") == three_users


class TestFoldDeletion:
    """Test suite for fold_deletion."""

    def test_removes_only_the_user(self, three_users: list[User]) -> None:
        folded = fold_deletion(three_users, "2")

        assert [user.id for user in folded] == ["1", "3"]
        assert folded[0] is three_users[0]
        assert folded[1] is three_users[2]

    def test_is_idempotent(self, three_users: list[User]) -> None:
        once = fold_deletion(three_users, "2")

        assert fold_deletion(once, "2") == once


class TestUserCache:
    """Test suite for UserCache."""

    def test_load_rejects_duplicate_ids(self, three_users: list[User]) -> None:
        cache = UserCache()

        with pytest.raises(DuplicateUserError):
            cache.load([*three_users, User(id="1", email="z@x")], [])

        assert cache.users == []

    def test_apply_replaces_collection(self, three_users: list[User]) -> None:
        cache = UserCache()
        cache.load(three_users, [Role(name="admin")])
        before = cache.users

        cache.apply(fold_role_binding, "3", "admin")

        assert cache.users is not before
        assert before[2].role is None
        assert cache.find("3").role == Role(name="admin")

    def test_find_and_has_role(self, three_users: list[User]) -> None:
        cache = UserCache()
        cache.load(three_users, [Role(name="admin")])

        assert cache.find("2") is three_users[1]
        assert cache.find("9") is None
        assert cache.has_role("admin")
        assert not cache.has_role("member")

    def test_ids_stay_unique_after_folds(self, three_users: list[User]) -> None:
        cache = UserCache()
        cache.load(three_users, [])

        cache.apply(fold_role_binding, "1", "admin")
        cache.apply(fold_deletion, "2")
        cache.apply(fold_role_binding, "3", "member")

        ids = [user.id for user in cache.users]
        assert len(ids) == len(set(ids))
