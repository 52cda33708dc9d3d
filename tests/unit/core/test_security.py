"""
Тесты для хеширования паролей
"""
import pytest

from messenger.core.security import get_password_hash, verify_password

pytestmark = pytest.mark.unit


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cret")

    assert hashed != "s3cret"
    assert hashed.startswith("$pbkdf2-sha256$")
    assert verify_password("s3cret", hashed)
    assert not verify_password("S3cret", hashed)


def test_password_hash_is_salted():
    assert get_password_hash("same") != get_password_hash("same")
