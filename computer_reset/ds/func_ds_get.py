import re
import logging

import ldap
import ldap.filter

from .data import DataDSLDAP, DataDSProperties, DS_IDENTITY_KIND
from .ds_dict import DSDict
from .convertors_value import c_sid_byte_to_string, c_guid_byte_to_string, c_guid_string_to_filter, uac_to_flags
from .errors import ComputerNotFoundError, AmbiguousIdentityError

RE_DN = re.compile(r'^(cn|ou|dc)=', re.IGNORECASE)
RE_GUID = re.compile(r'^[{]?[0-9a-fA-F]{8}-([0-9a-fA-F]{4}-){3}[0-9a-fA-F]{12}[}]?$')
RE_SID = re.compile(r'^S-1-\d+(-\d+)+$', re.IGNORECASE)

# Обработчики значений атрибутов, которые возвращает DS в бинарном виде
TYPE_HANDLERS = {
    'objectsid': c_sid_byte_to_string,
    'objectguid': c_guid_byte_to_string,
    'useraccountcontrol': lambda v: int(v.decode("utf-8")),
}


def identity_kind(identity: str) -> DS_IDENTITY_KIND:
    """
    Определение формы идентификатора компьютера.

    Args:
        identity: distinguishedName, objectGUID, objectSid или sAMAccountName

    Returns:
        Имя атрибута, по которому будет искаться объект
    """
    if not isinstance(identity, str) or not identity.strip():
        raise ValueError("Identity must be a non-empty string")

    identity = identity.strip()

    if RE_DN.search(identity):
        return "distinguishedName"
    elif RE_GUID.search(identity):
        return "objectGUID"
    elif RE_SID.search(identity):
        return "objectSid"
    return "sAMAccountName"


def gen_filter_to_id(identity: str) -> str:
    """Формирование LDAP-фильтра для поиска одного компьютера по идентификатору"""
    kind = identity_kind(identity)
    identity = identity.strip()

    if kind == "distinguishedName":
        return f"(distinguishedName={ldap.filter.escape_filter_chars(identity)})"
    elif kind == "objectGUID":
        return f"(objectGUID={c_guid_string_to_filter(identity)})"
    elif kind == "objectSid":
        return f"(objectSid={identity.upper()})"

    # sAMAccountName компьютера всегда заканчивается на $
    if not identity.endswith('$'):
        identity += '$'
    return f"(sAMAccountName={ldap.filter.escape_filter_chars(identity)})"


def object_processing(data: dict) -> DSDict:
    """Конвертация атрибутов объекта, полученных от DS"""
    result = DSDict()
    for attr, values in data.items():
        handler = TYPE_HANDLERS.get(attr.lower(), lambda v: v.decode("utf-8"))
        values = [handler(v) for v in values]
        result[attr] = values if attr.lower() == 'objectclass' else values[0]

    if 'userAccountControl' in result:
        result['Enabled'] = 'ACCOUNTDISABLE' not in uac_to_flags(result['userAccountControl'])

    return result


def search_computer(connect, _logger: logging.Logger, base: str, identity: str) -> list[DSDict]:
    """
    Поиск компьютера в каталоге по идентификатору (по всему поддереву области).

    Args:
        connect: Открытая сессия python-ldap
        _logger: Логгер сессии
        base: Область поиска
        identity: distinguishedName, objectGUID, objectSid или sAMAccountName

    Returns:
        Список найденных объектов
    """
    ldap_filter = DataDSLDAP.COMPUTER.unit(gen_filter_to_id(identity))
    properties = DataDSProperties.COMPUTER.value

    _logger.info(f"Get computer: search_base: {base}, ldap_filter: {ldap_filter}")

    objects = connect.search_s(base, ldap.SCOPE_SUBTREE, ldap_filter, properties)

    # Ссылки (referrals) возвращаются с пустым DN, они пропускаются
    return [object_processing(data) for dn, data in objects if dn]


def resolve_computer(connect, _logger: logging.Logger, base: str, identity: str) -> DSDict:
    """Поиск строго одного компьютера. Если объект не найден или найдено несколько, вызывается исключение"""
    result = search_computer(connect=connect, _logger=_logger, base=base, identity=identity)

    if len(result) == 0:
        raise ComputerNotFoundError(f"Computer not found: {identity}")
    elif len(result) > 1:
        raise AmbiguousIdentityError(f"Found more than one object for identity: {identity}")

    return result[0]
