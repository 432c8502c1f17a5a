import typing
from enum import Enum

import ldap

DS_IDENTITY_KIND = typing.Literal["sAMAccountName", "distinguishedName", "objectSid", "objectGUID"]
DS_FAILURE_KIND = typing.Literal["access-denied", "password-policy", "transient", "other"]

# Порты, на которых допускается подключение к DS
prefix_ldap = {
    636: 'ldaps',
    389: 'ldap'
}

# Уровни проверки сертификата контроллера домена
tls_levels = {
    'never': ldap.OPT_X_TLS_NEVER,
    'allow': ldap.OPT_X_TLS_ALLOW,
    'try': ldap.OPT_X_TLS_TRY,
    'demand': ldap.OPT_X_TLS_DEMAND,
    'hard': ldap.OPT_X_TLS_HARD,
}


class DataDSLDAP(Enum):
    """
    LDAP-фильтры типов объектов. Функция <unit> используется для объединения исходного LDAP-запроса с типом объекта
    (вызывается после вызова переменной)
    """
    COMPUTER = "(objectCategory=computer)"

    def unit(self, data: str):
        """
        Функция добавляющая фильтр объекта в переданный фильтр.
        Пример вызова: DataDSLDAP[<название объекта из класса>].unit(<исходный фильтр>>)
        :param data: Исходный фильтр
        :return: Обновлённый LDAP-фильтр
        """
        return f"(&{self.value}{data})"


class DataDSProperties(Enum):
    """
    Список свойств, которые запрашиваются по умолчанию
    """
    COMPUTER = ["distinguishedName", "name", "objectClass", "objectGUID", "objectSid", "sAMAccountName",
                "dNSHostName", "userAccountControl"]
