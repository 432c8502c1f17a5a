"""Test fixtures: fake python-ldap connection and sample computer objects."""

import os
import re
import struct
import tempfile
import uuid

# Логи тестов пишутся во временную папку, до импорта конфигурации
os.environ.setdefault("COMPRESET__APP__LOGS_FOLDER", tempfile.mkdtemp(prefix="computer_reset_logs_"))
os.environ.setdefault("COMPRESET__APP__SUCKERS_DS", "true")

import ldap  # noqa: E402
import pytest  # noqa: E402

COMPUTER_DN = "CN=WS01,OU=Workstations,DC=contoso,DC=local"
COMPUTER_SID = "S-1-5-21-1004336348-1177238915-682003330-1105"
COMPUTER_GUID = "3f2504e0-4f89-41d3-9a0c-0305e82c3301"

OTHER_DN = "CN=WS02,OU=Workstations,DC=contoso,DC=local"
OTHER_SID = "S-1-5-21-1004336348-1177238915-682003330-1106"
OTHER_GUID = "9a7b3c1d-2e4f-4a5b-8c6d-7e8f9a0b1c2d"


def sid_to_bytes(sid: str) -> bytes:
    parts = sid.split('-')
    sub_authorities = [int(i) for i in parts[3:]]
    return (struct.pack('BB', int(parts[1]), len(sub_authorities)) +
            struct.pack('>Q', int(parts[2]))[2:] +
            struct.pack(f'<{len(sub_authorities)}L', *sub_authorities))


RE_CLAUSE = re.compile(r'\((sAMAccountName|distinguishedName|objectSid|objectGUID)=((?:[^()\\]|\\[0-9a-fA-F]{2})*)\)')


def unescape(value: str) -> bytes:
    return re.sub(rb'\\([0-9a-fA-F]{2})', lambda m: bytes([int(m.group(1), 16)]), value.encode())


def entry_matches(entry: tuple, filterstr: str) -> bool:
    """Сравнение записи с условием фильтра по идентификатору, как это делает контроллер домена"""
    match = RE_CLAUSE.search(filterstr)
    if not match:
        return True

    attr, value = match.group(1), unescape(match.group(2))
    dn, data = entry

    if attr == "sAMAccountName":
        return data["sAMAccountName"][0].lower() == value.lower()
    elif attr == "distinguishedName":
        return dn.encode().lower() == value.lower()
    elif attr == "objectSid":
        return data["objectSid"][0] == sid_to_bytes(value.decode())
    return data["objectGUID"][0] == value


def make_entry(dn: str = COMPUTER_DN, name: str = "WS01", sid: str = COMPUTER_SID, guid: str = COMPUTER_GUID,
               uac: int = 4096) -> tuple:
    return (dn, {
        "distinguishedName": [dn.encode()],
        "name": [name.encode()],
        "sAMAccountName": [f"{name}$".encode()],
        "objectClass": [b"top", b"person", b"organizationalPerson", b"user", b"computer"],
        "objectSid": [sid_to_bytes(sid)],
        "objectGUID": [uuid.UUID(guid).bytes_le],
        "dNSHostName": [f"{name.lower()}.contoso.local".encode()],
        "userAccountControl": [str(uac).encode()],
    })


class FakeDirectory:
    """Состояние фейкового каталога, общее для всех открытых соединений"""

    def __init__(self):
        self.entries = [make_entry()]
        self.down_hosts = set()
        self.bind_error = None
        self.modify_error = None
        self.root_dse = {"defaultNamingContext": [b"DC=contoso,DC=local"],
                         "namingContexts": [b"DC=contoso,DC=local", b"DC=DomainDnsZones,DC=contoso,DC=local"]}
        self.connections = []

    @property
    def calls(self) -> list:
        return [call for conn in self.connections for call in conn.calls]

    def calls_of(self, name: str) -> list:
        return [call for call in self.calls if call[0] == name]


class FakeLDAPObject:
    def __init__(self, uri: str, directory: FakeDirectory):
        self.uri = uri
        self.directory = directory
        self.calls = []

    def _check_host(self):
        host = self.uri.split("://")[1].rsplit(":", 1)[0]
        if host in self.directory.down_hosts:
            raise ldap.SERVER_DOWN({"desc": "Can't contact LDAP server"})

    def set_option(self, option, value):
        self.calls.append(("set_option", option, value))

    def simple_bind_s(self, who, cred):
        self.calls.append(("simple_bind_s", who, cred))
        self._check_host()
        if self.directory.bind_error:
            raise self.directory.bind_error

    def sasl_interactive_bind_s(self, who, auth):
        self.calls.append(("sasl_interactive_bind_s", who, auth))
        self._check_host()
        if self.directory.bind_error:
            raise self.directory.bind_error

    def search_s(self, base, scope, filterstr, attrlist=None):
        self.calls.append(("search_s", base, scope, filterstr, attrlist))
        if base == "":
            return [("", self.directory.root_dse)]
        entries = [e for e in self.directory.entries if entry_matches(e, filterstr)]
        return entries + [(None, ["ldap://referral.contoso.local/DC=contoso,DC=local"])]

    def modify_s(self, dn, modlist):
        self.calls.append(("modify_s", dn, modlist))
        if self.directory.modify_error:
            raise self.directory.modify_error

    def unbind_s(self):
        self.calls.append(("unbind_s",))


@pytest.fixture
def directory(monkeypatch) -> FakeDirectory:
    state = FakeDirectory()

    def initialize(uri, *args, **kwargs):
        conn = FakeLDAPObject(uri, state)
        state.connections.append(conn)
        return conn

    monkeypatch.setattr(ldap, "initialize", initialize)
    return state
