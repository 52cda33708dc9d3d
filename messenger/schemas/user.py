from pydantic import BaseModel, ConfigDict, Field, field_validator


# Схема для создания пользователя
class UserCreate(BaseModel):
    login: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1, max_length=20)
    status: str = Field("", max_length=140)

    @field_validator("login")
    @classmethod
    def validate_login(cls, v: str) -> str:
        """Логин не должен содержать пробелов"""
        v = v.strip()
        if not v or any(ch.isspace() for ch in v):
            raise ValueError("Логин не должен быть пустым или содержать пробелы")
        return v

    @field_validator("phone", "status")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()


# Схема контакта: логин и статус
class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    login: str
    status: str
