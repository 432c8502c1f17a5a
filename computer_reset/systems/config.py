import os
from importlib import resources

from dotenv import load_dotenv
from configparser import ConfigParser

# Загрузка переменных из окружения
load_dotenv()

ENV_PREFIX = "COMPRESET"

# Путь к конфигурационному файлу может быть переопределён, иначе используется файл из состава пакета
CONFIG_PATH = os.getenv(f"{ENV_PREFIX}_CONFIG")

# Проверка, что файл найден
if CONFIG_PATH and not os.path.exists(CONFIG_PATH):
    raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")


def _env(chapter: str, name: str) -> str | None:
    return os.getenv(f"{ENV_PREFIX}__{chapter.upper()}__{name.upper()}")


def _read_bool(config: ConfigParser, chapter: str, name: str, default: bool = None) -> bool:
    """
    Функция конвертации буллевых значений из параметров конфигурации
    Args:
        config: Прочтённый файл конфигурации
        chapter: Область конфигурационного файла
        name: Переменная
        default: Значение, которое будет выставлено по умолчанию, если параметр не найден
    Returns:
        Буллевое значение
    """
    env = _env(chapter, name)

    if env:
        if env.upper() == 'TRUE':
            return True
        elif env.upper() == 'FALSE':
            return False
        else:
            raise ValueError(f"Invalid value for {name}")
    elif config.get(chapter, name, fallback=None):
        return config.getboolean(chapter, name)
    elif default is not None:
        return default
    else:
        raise ValueError(f"Not find [{chapter}][{name}]")


def _read_any(config: ConfigParser, chapter: str, name: str, type_: type = str, default=None, required: bool = True):
    """
    Функция конвертации любых значений из параметров конфигурации
    Args:
        config: Прочтённый файл конфигурации
        chapter: Область конфигурационного файла
        name: Переменная
        type_: Ожидаемый тип атрибута
        default: Значение, которое будет выставлено по умолчанию, если параметр не найден
        required: Если параметр не найден и нет значения по умолчанию, вызывается исключение
    Returns:
        Итоговое значение
    """
    env = _env(chapter, name)

    if env:
        return type_(env)
    elif config.get(chapter, name, fallback=None):
        return type_(config.get(chapter, name))
    elif default is not None or not required:
        return default
    else:
        raise ValueError(f"Not find [{chapter}][{name}]")


class _AppConfig:
    def __init__(self, path: str = CONFIG_PATH):
        _config = ConfigParser()
        if path:
            _config.read(path, encoding='utf-8-sig')
        else:
            _config.read_string(resources.files("computer_reset").joinpath("config.cfg").read_text("utf-8-sig"))

        # Публикация эндпоинтов DS
        self.SUCKERS_DS = _read_bool(config=_config, chapter='app', name='SUCKERS_DS', default=False)

        # Параметры логирования приложения (папка создаётся при включении записи логов в файл)
        self.LOGS_FOLDER = _read_any(config=_config, chapter='app', name='LOGS_FOLDER').rstrip("/")

        self.LOGS_MASK_KEYS = _read_any(config=_config, chapter='app', name='LOGS_MASK_KEYS', default='')
        self.LOGS_MASK_KEYS = [i.strip().lower() for i in self.LOGS_MASK_KEYS.split(',') if i.strip()]
        self.LOGS_MASK_KEYS = sorted(set(self.LOGS_MASK_KEYS + ['password', 'new_password', 'unicodepwd']))

        # Параметры подключения к DS по умолчанию
        self.DS_HOST = _read_any(config=_config, chapter='ds', name='HOST', required=False)
        self.DS_PORT = _read_any(config=_config, chapter='ds', name='PORT', type_=int, default=636)
        self.DS_BASE = _read_any(config=_config, chapter='ds', name='BASE', required=False)
        self.DS_KEYTAB = _read_any(config=_config, chapter='ds', name='KEYTAB', required=False)
        self.DS_KEYTAB_PRINCIPAL = _read_any(config=_config, chapter='ds', name='KEYTAB_PRINCIPAL', required=False)
        self.DS_DRY_RUN = _read_bool(config=_config, chapter='ds', name='DRY_RUN', default=False)

        if self.DS_PORT not in (389, 636):
            raise ValueError("[ds][PORT] only 389 or 636")

        # Проверка сертификата контроллеров домена
        self.DS_TLS_REQUIRE_CERT = _read_any(config=_config, chapter='ds', name='TLS_REQUIRE_CERT',
                                             default='demand').lower()
        self.DS_CA_FILE = _read_any(config=_config, chapter='ds', name='CA_FILE', required=False)

        if self.DS_TLS_REQUIRE_CERT not in ('never', 'allow', 'try', 'demand', 'hard'):
            raise ValueError("[ds][TLS_REQUIRE_CERT] only never, allow, try, demand or hard")

        self.PORT = _read_any(config=_config, chapter='web', name='PORT', type_=int, default=5001)


AppConfig = _AppConfig()
