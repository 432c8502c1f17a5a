import struct
import uuid

UAC_FLAGS = {
    'SCRIPT': 0x0001,
    'ACCOUNTDISABLE': 0x0002,
    'HOMEDIR_REQUIRED': 0x0008,
    'LOCKOUT': 0x0010,
    'PASSWD_NOTREQD': 0x0020,
    'PASSWD_CANT_CHANGE': 0x0040,
    'ENCRYPTED_TEXT_PWD_ALLOWED': 0x0080,
    'TEMP_DUPLICATE_ACCOUNT': 0x0100,
    'NORMAL_ACCOUNT': 0x0200,
    'INTERDOMAIN_TRUST_ACCOUNT': 0x0800,
    'WORKSTATION_TRUST_ACCOUNT': 0x1000,
    'SERVER_TRUST_ACCOUNT': 0x2000,
    'DONT_EXPIRE_PASSWORD': 0x10000,
    'MNS_LOGON_ACCOUNT': 0x20000,
    'SMARTCARD_REQUIRED': 0x40000,
    'TRUSTED_FOR_DELEGATION': 0x80000,
    'NOT_DELEGATED': 0x100000,
    'USE_DES_KEY_ONLY': 0x200000,
    'DONT_REQ_PREAUTH': 0x400000,
    'PASSWORD_EXPIRED': 0x800000,
    'TRUSTED_TO_AUTH_FOR_DELEGATION': 0x1000000,
    'PARTIAL_SECRETS_ACCOUNT': 0x04000000
}


def uac_to_flags(numeric: int) -> list:
    return [name for name, bit in UAC_FLAGS.items() if numeric & bit]


def c_sid_byte_to_string(data: bytes) -> str:
    """Конвертация бинарного objectSid в строку вида S-1-5-21-..."""
    version = struct.unpack('B', data[0:1])[0]
    if version != 1:
        raise ValueError(f"Unsupported SID revision: {version}")
    length = struct.unpack('B', data[1:2])[0]
    authority = struct.unpack(b'>Q', b'\x00\x00' + data[2:8])[0]
    string = 'S-%d-%d' % (version, authority)
    data = data[8:]
    if len(data) != 4 * length:
        raise ValueError("Invalid SID length")
    for i in range(length):
        value = struct.unpack('<L', data[4 * i:4 * (i + 1)])[0]
        string += '-%d' % value

    return string


def c_guid_byte_to_string(data: bytes) -> str:
    """Конвертация бинарного objectGUID (little-endian) в строковую форму"""
    return str(uuid.UUID(bytes_le=data))


def c_guid_string_to_filter(guid: str) -> str:
    """
    Конвертация строкового GUID в значение для LDAP-фильтра.
    DS хранит objectGUID в бинарном виде, поэтому каждый байт экранируется (\\xx)
    """
    data = uuid.UUID(guid.strip('{}')).bytes_le
    return ''.join(f"\\{b:02x}" for b in data)


def domain_to_base(domain: str) -> str:
    """Конвертация DNS-имени домена в область каталога: contoso.local -> DC=contoso,DC=local"""
    parts = [i for i in domain.strip().strip('.').split('.') if i]
    if not parts:
        raise ValueError(f"Invalid domain name: {domain!r}")
    return ','.join(f"DC={i}" for i in parts)
