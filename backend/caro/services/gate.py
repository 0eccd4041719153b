from typing import Optional, Set

from flask_bcrypt import Bcrypt


class PasswordGate:
    """Admits connections that present the room password.

    Only a bcrypt hash of the password is kept. A gate built without a hash is
    open and admits everyone.
    """

    def __init__(self, bcrypt: Bcrypt, password_hash: Optional[str] = None):
        self._bcrypt = bcrypt
        self._password_hash = password_hash
        self._admitted: Set[str] = set()

    @classmethod
    def from_config(cls, bcrypt: Bcrypt, config) -> 'PasswordGate':
        password_hash = config.get('GAME_PASSWORD_HASH')
        if not password_hash and config.get('GAME_PASSWORD'):
            password_hash = bcrypt.generate_password_hash(config['GAME_PASSWORD']).decode('utf-8')
        return cls(bcrypt, password_hash or None)

    @property
    def is_open(self) -> bool:
        return self._password_hash is None

    def check(self, password) -> bool:
        if self.is_open:
            return True
        if not isinstance(password, str) or not password:
            return False
        return self._bcrypt.check_password_hash(self._password_hash, password)

    def admit(self, sid: str, password=None) -> bool:
        if sid in self._admitted:
            return True
        if not self.check(password):
            return False
        self._admitted.add(sid)
        return True

    def is_admitted(self, sid: str) -> bool:
        return sid in self._admitted

    def forget(self, sid: str) -> bool:
        """Drop a connection; returns whether it had been admitted."""
        if sid in self._admitted:
            self._admitted.discard(sid)
            return True
        return False
