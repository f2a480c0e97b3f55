from unittest.mock import MagicMock, patch

import bcrypt
import pytest

from terrain.models.account import Account
from terrain.models.invitation import Invitation
from terrain.services.account_service import AccountService
from terrain.services.errors import ValidationError


class TestAccountService:
    def setup_method(self):
        self.mock_repo = MagicMock()
        self.mock_subscription_repo = MagicMock()
        self.mock_invitation_repo = MagicMock()
        self.service = AccountService(self.mock_repo, self.mock_subscription_repo, self.mock_invitation_repo)
        self.mock_repo.get_by_email.return_value = None
        self.mock_repo.create.side_effect = lambda account: account.model_copy(update={"id": 5, "uuid": "new-uuid"})
        self.mock_invitation_repo.list_pending_by_email.return_value = []

    @patch("terrain.services.account_service.bcrypt.gensalt", return_value=bcrypt.gensalt(rounds=4))
    def test_register(self, mock_gensalt):
        account = self.service.register(" New@X.com ", "pw", " Nina ")

        created = self.mock_repo.create.call_args[0][0]
        assert created.email == "new@x.com"
        assert created.display_name == "Nina"
        assert bcrypt.checkpw(b"pw", created.password_hash.encode())
        self.mock_subscription_repo.upsert.assert_called_once_with(5, "free")
        assert account.team_owner_id is None

    def test_register_invalid_email(self):
        with pytest.raises(ValidationError):
            self.service.register("bad", "pw")
        self.mock_repo.create.assert_not_called()

    def test_register_empty_password(self):
        with pytest.raises(ValidationError, match="Password required"):
            self.service.register("new@x.com", "")

    def test_register_duplicate(self):
        self.mock_repo.get_by_email.return_value = Account(id=1, email="new@x.com")
        with pytest.raises(ValidationError, match="already exists"):
            self.service.register("new@x.com", "pw")

    @patch("terrain.services.account_service.bcrypt.gensalt", return_value=bcrypt.gensalt(rounds=4))
    def test_register_claims_newest_pending_invitation(self, mock_gensalt):
        self.mock_invitation_repo.list_pending_by_email.return_value = [
            Invitation(id=20, uuid="newest", inviter_id=7, email="new@x.com"),
            Invitation(id=10, uuid="older", inviter_id=3, email="new@x.com"),
        ]

        account = self.service.register("new@x.com", "pw")

        assert account.team_owner_id == 7
        self.mock_repo.set_team_owner.assert_called_once_with(5, 7)
        self.mock_invitation_repo.mark_accepted.assert_called_once_with(20)

    def test_authenticate(self):
        password_hash = bcrypt.hashpw(b"pw", bcrypt.gensalt(rounds=4)).decode()
        self.mock_repo.get_by_email.return_value = Account(id=1, email="a@x.com", password_hash=password_hash)
        assert self.service.authenticate("A@x.com", "pw").id == 1
        assert self.service.authenticate("a@x.com", "wrong") is None

    def test_authenticate_unknown(self):
        assert self.service.authenticate("ghost@x.com", "pw") is None

    def test_passthroughs(self):
        self.mock_repo.list_all.return_value = [Account(id=1, email="a@x.com")]
        assert len(self.service.list_accounts()) == 1
        self.service.get_by_id(1)
        self.mock_repo.get_by_id.assert_called_once_with(1)
