import bcrypt

DEFAULT_ROUNDS = 12
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases reject longer input
    return password.encode()[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor"""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds
        # Checked against when the account does not exist so sign-in takes the same time
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False

    def burn(self, password: str) -> None:
        bcrypt.checkpw(_encode(password), self._dummy_hash)
