import ldap
from pydantic import BaseModel, SecretStr

from computer_reset.ds import DSHook, DSDict, ContextAcquisitionError, ComputerNotFoundError, AmbiguousIdentityError
from computer_reset.ds.errors import failure_kind, error_detail
from computer_reset.systems.config import AppConfig
from computer_reset.systems.logging import logger


class Credential(BaseModel):
    """Альтернативная учётная запись для открытия сессии с DS"""
    login: str
    password: SecretStr


def reset_computer_password(identity: str, new_password: SecretStr, domain: str = None,
                            credential: Credential = None, host: str | list = None, port: int = None,
                            base: str = None, dry_run: bool = None) -> DSDict | None:
    """
    Сброс пароля учётной записи компьютера в DS.
    Все ошибки не фатальные: они выводятся в лог как предупреждение, а функция возвращает None.
    Повторные попытки не выполняются.

    Args:
        identity: distinguishedName, objectGUID, objectSid или sAMAccountName компьютера
        new_password: Новый пароль (в логи не выводится)
        domain: DNS-имя домена. Если не указан, используются параметры из конфигурации
        credential: Альтернативная учётная запись. Если не указана, используются билеты Kerberos текущей сессии
        host: Контроллеры домена (по умолчанию из конфигурации, либо DNS-имя домена)
        port: Порт подключения: 389 или 636
        base: Область каталога
        dry_run: Формирование запроса, без внесения изменений в DS

    Returns:
        Объект компьютера, если пароль изменён, иначе None
    """
    if not isinstance(new_password, SecretStr):
        new_password = SecretStr(new_password)

    try:
        hook = DSHook(
            host=host or AppConfig.DS_HOST,
            login=credential.login if credential else AppConfig.DS_KEYTAB_PRINCIPAL,
            password=credential.password if credential else None,
            keytab=None if credential else AppConfig.DS_KEYTAB,
            port=port or AppConfig.DS_PORT,
            base=base or AppConfig.DS_BASE,
            domain=domain,
            dry_run=AppConfig.DS_DRY_RUN if dry_run is None else dry_run,
            tls_require_cert=AppConfig.DS_TLS_REQUIRE_CERT,
            ca_file=AppConfig.DS_CA_FILE,
        )

        with hook as ds:
            try:
                computer = ds.get_computer(identity=identity)
            except (ComputerNotFoundError, AmbiguousIdentityError, ValueError, ldap.LDAPError) as e:
                logger.warning(f"Computer lookup failed: {e}")
                return None

            try:
                ds.set_account_password(identity=computer, account_password=new_password)
            except Exception as e:
                logger.warning(f"Failed to set password for {computer['distinguishedName']} "
                               f"[{failure_kind(e)}]: {error_detail(e)}")
                return None
    except (ContextAcquisitionError, ValueError) as e:
        logger.warning(f"Can't acquire directory context (domain: {domain}): {e}")
        return None

    logger.info(f"Password of computer {computer.get('sAMAccountName')} "
                f"({computer['distinguishedName']}) has been reset")
    return computer
