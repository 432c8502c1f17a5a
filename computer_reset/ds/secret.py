from contextlib import contextmanager
from typing import Iterator

from pydantic import SecretStr

MASK = '***'

# Ключи, значения которых никогда не выводятся в логи
DEFAULT_MASK_KEYS = ('password', 'account_password', 'new_password', 'unicodepwd')


@contextmanager
def exposed_password(secret: SecretStr) -> Iterator[bytes]:
    """
    Раскрытие пароля в виде, который ожидает атрибут unicodePwd
    (пароль в двойных кавычках, кодировка UTF-16-LE).
    Значение формируется при входе в блок, не сохраняется ни в каких объектах
    и перестаёт быть доступным через локальные ссылки при выходе, в том числе при ошибке.
    Python не позволяет гарантированно стереть неизменяемые str/bytes из памяти.

    Args:
        secret: Пароль

    Returns:
        Байтовое значение для записи в unicodePwd
    """
    if not isinstance(secret, SecretStr):
        raise TypeError("Password must be passed as SecretStr")

    value = f'"{secret.get_secret_value()}"'.encode("utf-16-le")
    try:
        yield value
    finally:
        del value


def mask_value(key: str, value, mask_keys=DEFAULT_MASK_KEYS):
    """Замена секретного значения маской для вывода в логи"""
    if isinstance(value, SecretStr):
        return MASK
    if key.lower() in [i.lower() for i in mask_keys] and value is not None:
        return MASK
    if isinstance(value, dict):
        return {k: mask_value(k, v, mask_keys) for k, v in value.items()}
    return value


def mask_dict(data: dict, mask_keys=DEFAULT_MASK_KEYS) -> dict:
    return {k: mask_value(k, v, mask_keys) for k, v in data.items()}
