"""Thin forwarding calls to the auth provider with user-facing alerts."""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

AlertFn = Callable[[str, str], None]

INVALID_CREDENTIALS = "Invalid login credentials"


def _log_alert(title: str, message: str) -> None:
    logger.warning(f"{title}: {message}")


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


class AuthClient:
    def __init__(self, auth, alert: Optional[AlertFn] = None):
        self.auth = auth
        self.alert = alert or _log_alert

    def sign_in(self, email: str, password: str):
        try:
            return self.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Login failed: {message}")
            self.alert("Erro", "Credenciais inválidas" if message == INVALID_CREDENTIALS else f"Erro no login: {message}")
            raise

    def sign_up(self, name: str, email: str, phone: str, password: str, user_type: str):
        try:
            response = self.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name, "phone": phone, "user_type": user_type}},
            })
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Sign up failed: {message}")
            if "already registered" in message:
                self.alert("Erro", "Este email já está cadastrado")
            else:
                self.alert("Erro", f"Erro no cadastro: {message}")
            raise
        self.alert("Sucesso", "Cadastro realizado com sucesso! Verifique seu email para confirmar sua conta.")
        return response

    def sign_out(self) -> bool:
        try:
            self.auth.sign_out()
            return True
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Sign out failed: {message}")
            self.alert("Erro", f"Erro ao sair: {message}")
            return False

    def reset_password(self, email: str) -> None:
        try:
            self.auth.reset_password_for_email(email)
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Password reset failed: {message}")
            self.alert("Erro", f"Erro ao recuperar senha: {message}")
            raise
        self.alert("Sucesso", "Instruções para recuperar sua senha foram enviadas para seu email.")
