"""
Модуль конфигурации приложения.

Собирает параметры запуска (каталоги, порог возраста, режим журнала)
в единый объект Config с валидацией. Файла конфигурации нет:
все значения приходят из командной строки или берутся по умолчанию.
"""

from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass, field


DEFAULT_CUTOFF_MONTHS = 6
LOG_DIR_NAME = "logs"
LOG_FILE_NAME = "AutoSort.log"

LOG_MODES = ('timestamp', 'append', 'overwrite')
TIME_SOURCES = ('creation', 'modified')


class ConfigError(ValueError):
    """Исключение для некорректных значений конфигурации."""
    pass


@dataclass
class PathsConfig:
    """Конфигурация путей."""
    source_dir: Path
    destination_dir: Path


@dataclass
class FilterConfig:
    """Параметры отбора файлов."""
    cutoff_months: int = DEFAULT_CUTOFF_MONTHS
    time_source: str = 'creation'


@dataclass
class LoggingConfig:
    """Конфигурация логирования."""
    log_dir: Path
    level: str = 'INFO'
    mode: str = 'timestamp'
    file_name: str = LOG_FILE_NAME


@dataclass
class Config:
    """Основная конфигурация приложения."""
    paths: PathsConfig
    filter: FilterConfig = field(default_factory=FilterConfig)
    logging: Optional[LoggingConfig] = None

    def __post_init__(self):
        if self.logging is None:
            self.logging = LoggingConfig(log_dir=self.paths.destination_dir / LOG_DIR_NAME)


def build_config(source_dir: Union[str, Path],
                 destination_dir: Union[str, Path],
                 cutoff_months: Optional[int] = None,
                 log_mode: str = 'timestamp',
                 time_source: str = 'creation',
                 level: str = 'INFO') -> Config:
    """
    Собирает и валидирует конфигурацию запуска.

    Args:
        source_dir: Каталог, который нужно разобрать
        destination_dir: Каталог, в который раскладываются файлы
        cutoff_months: Порог возраста файла в месяцах (по умолчанию 6)
        log_mode: Политика файла журнала (timestamp, append, overwrite)
        time_source: Источник даты файла (creation, modified)
        level: Уровень логирования

    Returns:
        Config: Объект конфигурации

    Raises:
        FileNotFoundError: Если один из каталогов не существует
        ConfigError: Если параметры некорректны
    """
    if cutoff_months is None:
        cutoff_months = DEFAULT_CUTOFF_MONTHS

    destination = Path(destination_dir)
    config = Config(
        paths=PathsConfig(
            source_dir=Path(source_dir),
            destination_dir=destination
        ),
        filter=FilterConfig(
            cutoff_months=cutoff_months,
            time_source=time_source
        ),
        logging=LoggingConfig(
            log_dir=destination / LOG_DIR_NAME,
            level=level,
            mode=log_mode
        )
    )

    validate_config(config)
    return config


def validate_config(config: Config) -> None:
    """Валидирует конфигурацию. Отсутствие каталогов - фатальная ошибка запуска."""
    # Проверка путей
    if not config.paths.source_dir.is_dir():
        raise FileNotFoundError(
            f"Pictures directory expected to be found at: {config.paths.source_dir}"
        )

    if not config.paths.destination_dir.is_dir():
        raise FileNotFoundError(
            f"AutoSort directory expected to be found at: {config.paths.destination_dir}"
        )

    # Проверка параметров отбора
    if config.filter.cutoff_months < 0:
        raise ConfigError("Порог возраста не может быть отрицательным")

    if config.filter.time_source not in TIME_SOURCES:
        raise ConfigError(f"Некорректный источник даты: {config.filter.time_source}")

    # Проверка параметров логирования
    if config.logging.mode not in LOG_MODES:
        raise ConfigError(f"Некорректный режим журнала: {config.logging.mode}")

    valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config.logging.level.upper() not in valid_levels:
        raise ConfigError(f"Некорректный уровень логирования: {config.logging.level}")
