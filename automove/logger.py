"""
Модуль для настройки и управления журналом запуска.

Каждое сообщение пишется одновременно в файл журнала и в консоль.
Сообщения об ошибках помечаются префиксом "ERROR: ", предупреждения -
префиксом "WARNING: ".
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime

from .config import LoggingConfig


class LoggerSetupError(Exception):
    """Исключение для ошибок подготовки журнала (фатальная ошибка запуска)."""
    pass


class ColoredFormatter(logging.Formatter):
    """Форматтер с цветным выводом для консоли."""

    # Цветовые коды ANSI
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record):
        """Форматирует запись, окрашивая её целиком по уровню."""
        formatted = super().format(record)
        color = self.COLORS.get(record.levelname)
        if color:
            return f"{color}{formatted}{self.COLORS['RESET']}"
        return formatted


def get_log_file_path(config: LoggingConfig, started: datetime) -> Path:
    """
    Возвращает путь к файлу журнала для выбранной политики.

    Args:
        config: Конфигурация логирования
        started: Время запуска (используется в режиме timestamp)

    Returns:
        Path: Путь к файлу журнала
    """
    if config.mode == 'timestamp':
        return Path(config.log_dir) / f"AutoSort_{started.strftime('%Y-%m-%d_%H-%M-%S')}.log"
    return Path(config.log_dir) / config.file_name


class OrganizerLogger:
    """Журнал запуска: файл в {destination}/logs и стандартный вывод."""

    LOGGER_NAME = 'automove'

    def __init__(self, config: LoggingConfig, started: Optional[datetime] = None):
        """
        Инициализация журнала.

        Args:
            config: Конфигурация логирования
            started: Время запуска (по умолчанию текущее)

        Raises:
            LoggerSetupError: Если не удалось создать каталог или файл журнала
        """
        self.config = config
        self.started = started or datetime.now()
        self.log_file = get_log_file_path(config, self.started)
        self.logger: Optional[logging.Logger] = None
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Настраивает логгер с файловым и консольным выводом."""
        level = getattr(logging, self.config.level.upper())

        self.logger = logging.getLogger(self.LOGGER_NAME)
        self.logger.setLevel(level)

        # Очищаем обработчики от предыдущего запуска
        self._close_handlers()

        log_dir = Path(self.config.log_dir)
        try:
            if not log_dir.exists():
                log_dir.mkdir()
        except OSError as e:
            raise LoggerSetupError(
                f"Logs directory could not be created at: {log_dir.absolute()} ({e})"
            )

        file_mode = 'w' if self.config.mode == 'overwrite' else 'a'
        try:
            file_handler = logging.FileHandler(
                filename=self.log_file,
                mode=file_mode,
                encoding='utf-8'
            )
        except OSError as e:
            raise LoggerSetupError(f"Log file could not be opened at: {self.log_file} ({e})")

        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        file_handler.setLevel(level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColoredFormatter(fmt='%(message)s'))
        console_handler.setLevel(level)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

        # Предотвращаем дублирование сообщений
        self.logger.propagate = False

    def _close_handlers(self) -> None:
        for handler in self.logger.handlers[:]:
            handler.close()
            self.logger.removeHandler(handler)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Сбрасывает и закрывает файл журнала."""
        if self.logger is not None:
            self._close_handlers()

    def get_logger(self) -> logging.Logger:
        """
        Возвращает настроенный логгер.

        Returns:
            logging.Logger: Настроенный логгер
        """
        if self.logger is None:
            raise RuntimeError("Логгер не инициализирован")
        return self.logger

    def log(self, message: str) -> None:
        """Информационное сообщение."""
        self.logger.info(message)

    def log_error(self, message: str) -> None:
        """Сообщение об ошибке с префиксом "ERROR: "."""
        self.logger.error(f"ERROR: {message}")

    def log_warning(self, message: str) -> None:
        """Предупреждение с префиксом "WARNING: "."""
        self.logger.warning(f"WARNING: {message}")

    def log_debug(self, message: str) -> None:
        self.logger.debug(message)

    def log_run_start(self, source_dir: Path, destination_dir: Path, cutoff_months: int) -> None:
        """
        Логирует начало запуска.

        Args:
            source_dir: Разбираемый каталог
            destination_dir: Каталог назначения
            cutoff_months: Порог возраста в месяцах
        """
        self.logger.info("Running...")
        self.logger.info(f"Source: {source_dir}")
        self.logger.info(f"Destination: {destination_dir}")
        self.logger.info(f"Age cutoff: {cutoff_months} months")

    def log_run_end(self, stats) -> None:
        """
        Логирует итоги запуска.

        Args:
            stats: Статистика запуска (OrganizeStats)
        """
        self.logger.info("Finished.")
        self.logger.info(f"  Files scanned: {stats.scanned_files}")
        self.logger.info(f"  Media files: {stats.media_files}")
        self.logger.info(f"  Moved: {stats.moved_files} (renamed: {stats.renamed_files})")
        self.logger.info(f"  Duplicates removed: {stats.duplicate_files}")
        self.logger.info(f"  Skipped (too old): {stats.skipped_files}")
        self.logger.info(f"  Errors: {stats.failed_files}")
        self.logger.info(f"  Directories created: {stats.created_directories}")
        self.logger.info(f"  Directories removed: {stats.removed_directories}")
        duration = stats.get_duration()
        if duration is not None:
            self.logger.info(f"  Duration: {duration:.2f} s")


def setup_logger(config: LoggingConfig, started: Optional[datetime] = None) -> OrganizerLogger:
    """
    Удобная функция для быстрой настройки журнала.

    Args:
        config: Конфигурация логирования
        started: Время запуска

    Returns:
        OrganizerLogger: Настроенный журнал
    """
    return OrganizerLogger(config, started)
