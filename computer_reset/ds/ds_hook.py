import os
import subprocess
import logging

import ldap
import ldap.sasl
from pydantic import SecretStr

from .ds_dict import DSDict
from .data import prefix_ldap, tls_levels
from .convertors_value import domain_to_base
from .errors import ContextAcquisitionError
from .func_ds_get import resolve_computer
from .secret import exposed_password


def kinit_keytab(keytab: str, login: str = None):
    """Запрос билетов Kerberos по Keytab-файлу. Без логина kinit берёт принципал по умолчанию (host/<fqdn>)"""
    os.environ["KRB5_CLIENT_KTNAME"] = keytab

    command = ["kinit", "-k", "-t", keytab]
    if login:
        command.append(login)

    subprocess.run(
        command,
        check=True,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        text=True,
    )


def search_root_dse(connect, _logger: logging.Logger) -> str:
    """Запрос области работы у DS. Разделы DomainDnsZones и ForestDnsZones исключаются"""
    res = connect.search_s("", ldap.SCOPE_BASE, "(objectClass=*)", ["defaultNamingContext", "namingContexts"])
    attrs = DSDict(res[0][1])

    if attrs.get('defaultNamingContext'):
        return attrs['defaultNamingContext'][0].decode()

    naming_contexts = [nc.decode() for nc in attrs.get('namingContexts', [])]
    naming_contexts = [nc for nc in naming_contexts if nc.lower().startswith("dc=")]

    if not naming_contexts:
        raise ContextAcquisitionError("Root DSE has no domain naming context")

    _logger.debug(f"Naming contexts: {naming_contexts}")
    return naming_contexts[0]


class DSHook:
    def __init__(self, host: str | list = None, login: str = None, password: str | SecretStr = None,
                 keytab: str = None, port: int = 636, base: str = None, domain: str = None,
                 dry_run: bool = False, tls_require_cert: str = "demand", ca_file: str = None) -> None:
        """
        Класс создаёт сессию с DS, в рамках который будет исполнен запрос к каталогу.
        Последовательность авторизации:
        1. Если указан "password", будет попытка авторизация по паролю (альтернативная учётная запись);
        2. Если указан "keytab", будет попытка запросить билеты на основе файла (для принципала "login", если указан);
        3. Если не указан "password" и "keytab", будет попытка использовать билеты Kerberos из текущей сессии

        Args:
            host: Адрес контроллера домена (если в строке будут указаны хосты через запятую или передан список хостов,
            хук будет последовательно подключается к следующему, если предыдущий будет недоступен).
            Если не указан, используется DNS-имя домена
            login: Логин учётной записи, от имени который создаётся сессия в DS
            password: Пароль от учётной записи
            keytab: Путь до Keytab-файла Если требуется запросить keytab
            port: Порт подключения: 389 или 636 (по умолчанию 636)
            base: Область каталога. Если не указать, она будет определена по домену или запрошена у DS
            domain: DNS-имя домена, в рамках которого открывается сессия
            dry_run: Формирование запроса, без внесения изменений в DS
            tls_require_cert: Проверка сертификата контроллера: never, allow, try, demand, hard
            ca_file: Файл с сертификатами удостоверяющих центров
        """

        self.dry_run = dry_run

        self._login = login
        self._password = password if isinstance(password, SecretStr) or password is None else SecretStr(password)
        self._keytab = keytab

        if not host and not domain:
            raise ValueError("Host or domain is required")

        if not host:
            host = domain

        self.domain = domain
        self.base = base if base else (domain_to_base(domain) if domain else None)
        self._host = [i.strip() for i in host.split(',') if i.strip()] if isinstance(host, str) else list(host)
        self._port = port
        if not prefix_ldap.get(port):
            raise ValueError("Only 636 or 389 ports are allowed")

        if tls_require_cert not in tls_levels:
            raise ValueError(f"Unknown TLS certificate check: {tls_require_cert}")
        self._tls_require_cert = tls_require_cert
        self._ca_file = ca_file

        self._connect = None

        # Создание уникального имени для логов
        self._logger = logging.getLogger(self.__class__.__name__)

    def _bind(self):
        if self._password is not None:  # Открытие сессии с DS по паролю
            self._connect.simple_bind_s(self._login or "", self._password.get_secret_value())
        else:
            # Запрос выпуска билетов на основе Keytab
            if self._keytab:
                kinit_keytab(keytab=self._keytab, login=self._login)

            # Открытие сессии с DS по билетам Kerberos
            self._connect.sasl_interactive_bind_s("", ldap.sasl.gssapi())

    def _unbind(self):
        """Закрытие соединения, которое не удалось использовать"""
        if self._connect is None:
            return
        try:
            self._connect.unbind_s()
        except ldap.LDAPError as e:
            self._logger.debug(f"Unbind: {e}")
        self._connect = None

    def __enter__(self):
        """Автоматическое открытие сессии"""

        for host in self._host:
            connect_line = f"{prefix_ldap[self._port]}://{host}:{self._port}"

            try:
                self._connect = ldap.initialize(connect_line)

                self._connect.set_option(ldap.OPT_REFERRALS, 0)
                self._connect.set_option(ldap.OPT_PROTOCOL_VERSION, 3)
                self._connect.set_option(ldap.OPT_X_TLS_REQUIRE_CERT, tls_levels[self._tls_require_cert])
                if self._ca_file:
                    self._connect.set_option(ldap.OPT_X_TLS_CACERTFILE, self._ca_file)
                # Применение параметров TLS, должно быть последним
                self._connect.set_option(ldap.OPT_X_TLS_NEWCTX, 0)

                self._logger.info(f"Run LDAP Connect: {connect_line}, "
                                  f"login: {self._login if self._password is not None else '<ambient>'}")

                self._bind()
                break
            except ldap.SERVER_DOWN as e:
                self._logger.warning(f"Host {connect_line}: {e}")
                self._unbind()
            except (ldap.LDAPError, subprocess.CalledProcessError, OSError) as e:
                self._unbind()
                raise ContextAcquisitionError(f"Bind to {connect_line} failed: {e}") from e

        else:
            raise ContextAcquisitionError("Can't contact LDAP servers")

        # Если область каталога не определена, производится запрос для установки области работы
        try:
            self.base = self.base if self.base else search_root_dse(connect=self._connect, _logger=self._logger)
        except ContextAcquisitionError:
            self._unbind()
            raise
        except ldap.LDAPError as e:
            self._unbind()
            raise ContextAcquisitionError(f"Can't read root DSE: {e}") from e

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Автоматическое закрытие сессии"""
        self._unbind()
        return False

    def get_computer(self, identity: str) -> DSDict:
        """
        Функция запроса компьютера из каталога DS.

        Args:
            identity: distinguishedName, objectGUID, objectSid или sAMAccountName (символ $ можно не указывать)

        Returns:
            Объект из DS
        """
        return resolve_computer(connect=self._connect, _logger=self._logger, base=self.base, identity=identity)

    def set_account_password(self, identity: str | DSDict, account_password: SecretStr) -> DSDict:
        """
        Функция изменения пароля учётной записи компьютера в DS.
        Открытое значение пароля формируется только на время запроса на изменение и не сохраняется в хуке.

        Args:
            identity: distinguishedName, objectGUID, objectSid, sAMAccountName или уже найденный объект (DSDict)
            account_password: Новый пароль

        Returns:
            Объект компьютера, пароль которого был изменён
        """
        if isinstance(identity, DSDict) and identity.get('distinguishedName'):
            result = identity
        else:
            result = self.get_computer(identity=identity)

        self._logger.info(f"Set computer password: DN: {result['distinguishedName']}, new value: ['***']")

        if self.dry_run:
            self._logger.warning("Enabled dry run")
            return result

        with exposed_password(account_password) as value:
            self._connect.modify_s(result['distinguishedName'], [(ldap.MOD_REPLACE, 'unicodePwd', [value])])

        return result
