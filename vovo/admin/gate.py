"""Shared-secret gate in front of the admin console.

A deterrent only: plain comparison, no hashing, no tokens, no lockout. The
authenticated flag lives in the gate instance and is gone on restart.
"""
from typing import Mapping, Optional

from ..app.config import Config, ConfigError
from ..utils.logger import get_logger
from ..utils.security import secrets_match

log = get_logger("admin")


class AdminGate:
    def __init__(self, configured_password: Optional[str] = None):
        password = configured_password if configured_password is not None else Config.ADMIN_PASSWORD
        if not password:
            raise ConfigError("Missing required configuration: VOVO_ADMIN_PASSWORD")
        self._configured = password
        self.authenticated = False

    def expected(self, settings: Mapping[str, str] = None) -> str:
        # a password saved from the console overrides the deployment one
        stored = (settings or {}).get("admin_password")
        return stored or self._configured

    def check(self, secret: str, settings: Mapping[str, str] = None) -> bool:
        self.authenticated = secrets_match(secret, self.expected(settings))
        if not self.authenticated:
            log.info("admin login rejected")
        return self.authenticated

    def logout(self):
        self.authenticated = False
