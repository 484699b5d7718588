from src.app.services.passwords import PasswordHasher

hasher = PasswordHasher(rounds=4)


def test_hash_and_verify():
    password_hash = hasher.hash("SecurePass123!")

    assert password_hash.startswith("$2")
    assert len(password_hash) == 60
    assert hasher.verify("SecurePass123!", password_hash)
    assert not hasher.verify("WrongPass123!", password_hash)


def test_hash_uses_configured_cost():
    assert hasher.hash("SecurePass123!").split("$")[2] == "04"


def test_hash_is_salted():
    assert hasher.hash("SecurePass123!") != hasher.hash("SecurePass123!")


def test_long_password_is_accepted():
    password = "x1" * 60
    password_hash = hasher.hash(password)

    assert hasher.verify(password, password_hash)


def test_malformed_stored_hash_does_not_verify():
    assert hasher.verify("SecurePass123!", "not-a-bcrypt-hash") is False


def test_burn_returns_nothing():
    assert hasher.burn("SecurePass123!") is None
