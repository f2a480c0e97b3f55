from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from terrain.repositories.base import RepositoryError
from terrain.repositories.sqlalchemy import SQLAlchemyAccountRepository


class TestAccountRepoCRUD:
    def test_create_and_get(self, account_repo, sample_account):
        created = account_repo.create(sample_account())
        assert created.id is not None
        assert len(created.uuid) == 26
        assert created.email == "owner@example.com"
        assert created.display_name == "Olivia Owner"
        assert created.team_owner_id is None
        assert created.created_at is not None

    def test_create_normalizes_email(self, account_repo, sample_account):
        created = account_repo.create(sample_account(email="  Mixed@Example.COM "))
        assert created.email == "mixed@example.com"

    def test_get_by_id_and_uuid(self, account_repo, sample_account):
        created = account_repo.create(sample_account())
        assert account_repo.get_by_id(created.id).uuid == created.uuid
        assert account_repo.get_by_uuid(created.uuid).id == created.id

    def test_get_by_email_is_case_insensitive(self, account_repo, sample_account):
        created = account_repo.create(sample_account())
        fetched = account_repo.get_by_email("OWNER@example.com ")
        assert fetched is not None
        assert fetched.id == created.id

    def test_get_missing(self, account_repo):
        assert account_repo.get_by_id(999) is None
        assert account_repo.get_by_uuid("nope") is None
        assert account_repo.get_by_email("ghost@example.com") is None

    def test_duplicate_email_raises_repository_error(self, account_repo, sample_account):
        account_repo.create(sample_account())
        with pytest.raises(RepositoryError):
            account_repo.create(sample_account(email="OWNER@example.com"))

    def test_list_all(self, account_repo, sample_account):
        account_repo.create(sample_account())
        account_repo.create(sample_account(email="b@example.com"))
        assert len(account_repo.list_all()) == 2


class TestTeamOwnership:
    def _owner_and_member(self, account_repo, sample_account):
        owner = account_repo.create(sample_account())
        member = account_repo.create(sample_account(email="member@example.com", display_name="Max"))
        return owner, member

    def test_set_team_owner_and_list(self, account_repo, sample_account):
        owner, member = self._owner_and_member(account_repo, sample_account)
        account_repo.set_team_owner(member.id, owner.id)

        members = account_repo.list_by_team_owner(owner.id)
        assert [m.id for m in members] == [member.id]
        assert account_repo.count_by_team_owner(owner.id) == 1
        assert account_repo.get_by_id(member.id).team_owner_id == owner.id

    def test_set_team_owner_to_self_rejected(self, account_repo, sample_account):
        owner = account_repo.create(sample_account())
        with pytest.raises(ValueError):
            account_repo.set_team_owner(owner.id, owner.id)

    def test_list_by_team_owner_empty(self, account_repo, sample_account):
        owner = account_repo.create(sample_account())
        assert account_repo.list_by_team_owner(owner.id) == []
        assert account_repo.count_by_team_owner(owner.id) == 0

    def test_clear_team_owner_scoped_to_owner(self, account_repo, sample_account):
        owner, member = self._owner_and_member(account_repo, sample_account)
        other = account_repo.create(sample_account(email="other@example.com"))
        account_repo.set_team_owner(member.id, owner.id)

        assert account_repo.clear_team_owner(member.id, other.id) is False
        assert account_repo.get_by_id(member.id).team_owner_id == owner.id

        assert account_repo.clear_team_owner(member.id, owner.id) is True
        assert account_repo.get_by_id(member.id).team_owner_id is None

    def test_clear_team_owner_twice(self, account_repo, sample_account):
        owner, member = self._owner_and_member(account_repo, sample_account)
        account_repo.set_team_owner(member.id, owner.id)
        assert account_repo.clear_team_owner(member.id, owner.id) is True
        assert account_repo.clear_team_owner(member.id, owner.id) is False


class TestErrorTranslation:
    def test_driver_error_rolls_back_and_wraps(self):
        conn = MagicMock()
        conn.execute.side_effect = OperationalError("UPDATE accounts", {}, Exception("db gone"))
        repo = SQLAlchemyAccountRepository(conn)

        with pytest.raises(RepositoryError, match="clear_team_owner"):
            repo.clear_team_owner(1, 2)
        conn.rollback.assert_called_once()
