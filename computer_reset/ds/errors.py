import ldap

from .data import DS_FAILURE_KIND


class DSError(RuntimeError):
    """Базовая ошибка работы с DS"""


class ContextAcquisitionError(DSError):
    """Не удалось открыть сессию с DS (контроллеры недоступны или отказано в авторизации)"""


class ComputerNotFoundError(DSError):
    """Объект компьютера не найден по переданному идентификатору"""


class AmbiguousIdentityError(DSError):
    """По идентификатору найдено больше одного объекта"""


# Классификация ошибок изменения пароля по исключениям python-ldap.
# UNWILLING_TO_PERFORM не относится к политике паролей: AD так отвечает на запись unicodePwd без шифрования
FAILURE_KINDS: dict[DS_FAILURE_KIND, tuple] = {
    'access-denied': (ldap.INSUFFICIENT_ACCESS, ldap.STRONG_AUTH_REQUIRED),
    'password-policy': (ldap.CONSTRAINT_VIOLATION,),
    'transient': (ldap.SERVER_DOWN, ldap.TIMEOUT, ldap.BUSY, ldap.UNAVAILABLE, ldap.CONNECT_ERROR),
}

UNENCRYPTED_HINT = "password changes require an encrypted connection (ldaps:// or SASL sealing)"


def failure_kind(error: BaseException) -> DS_FAILURE_KIND:
    for kind, errors in FAILURE_KINDS.items():
        if isinstance(error, errors):
            return kind
    return 'other'


def error_detail(error: BaseException) -> str:
    """
    Получение читаемого описания ошибки. python-ldap передаёт в args словарь с ключами desc, info
    """
    if isinstance(error, ldap.LDAPError) and error.args and isinstance(error.args[0], dict):
        data = error.args[0]
        detail = ", ".join(str(data[k]) for k in ('desc', 'info') if data.get(k)) or repr(data)
        if isinstance(error, ldap.UNWILLING_TO_PERFORM):
            detail = f"{detail} ({UNENCRYPTED_HINT})"
        return detail
    return str(error) or error.__class__.__name__
