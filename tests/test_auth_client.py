import pytest

from app.client import AuthClient


class RejectingAuth:
    def __init__(self, message):
        self.message = message

    def _fail(self, *args, **kwargs):
        raise Exception(self.message)

    sign_in_with_password = sign_up = sign_out = reset_password_for_email = _fail


class AcceptingAuth:
    def __init__(self):
        self.calls = []

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials))
        return "session"

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        return "user"

    def sign_out(self):
        self.calls.append(("sign_out",))

    def reset_password_for_email(self, email):
        self.calls.append(("reset", email))


@pytest.fixture
def alerts():
    return []


def _client(auth, alerts):
    return AuthClient(auth, alert=lambda title, message: alerts.append((title, message)))


def test_invalid_credentials_are_translated(alerts) -> None:
    with pytest.raises(Exception):
        _client(RejectingAuth("Invalid login credentials"), alerts).sign_in("a@b.com", "x")

    assert alerts == [("Erro", "Credenciais inválidas")]


def test_other_login_errors_keep_provider_message(alerts) -> None:
    with pytest.raises(Exception):
        _client(RejectingAuth("Email not confirmed"), alerts).sign_in("a@b.com", "x")

    assert alerts == [("Erro", "Erro no login: Email not confirmed")]


def test_sign_up_sends_profile_metadata(alerts) -> None:
    auth = AcceptingAuth()

    _client(auth, alerts).sign_up("Ana", "ana@example.com", "119999", "secret", "student")

    _, credentials = auth.calls[0]
    assert credentials["options"]["data"] == {"name": "Ana", "phone": "119999", "user_type": "student"}
    assert alerts[0][0] == "Sucesso"


def test_duplicate_sign_up(alerts) -> None:
    with pytest.raises(Exception):
        _client(RejectingAuth("User already registered"), alerts).sign_up("Ana", "a@b.com", "1", "x", "student")

    assert alerts == [("Erro", "Este email já está cadastrado")]


def test_sign_out_failure_is_reported_not_raised(alerts) -> None:
    assert _client(RejectingAuth("network down"), alerts).sign_out() is False
    assert alerts == [("Erro", "Erro ao sair: network down")]
    assert _client(AcceptingAuth(), alerts).sign_out() is True


def test_reset_password(alerts) -> None:
    auth = AcceptingAuth()
    _client(auth, alerts).reset_password("ana@example.com")

    assert auth.calls == [("reset", "ana@example.com")]
    assert alerts[-1][0] == "Sucesso"
