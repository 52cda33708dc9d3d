from passlib.context import CryptContext

from messenger.core.config import settings

# Контекст для хеширования паролей
pwd_context = CryptContext(schemes=settings.PASSWORD_HASH_SCHEMES, deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Проверка пароля"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Хеширование пароля"""
    return pwd_context.hash(password)
