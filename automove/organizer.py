"""
Модуль бизнес-логики раскладки файлов.

Объединяет обход дерева и операции с файлами: отбирает медиафайлы,
отбрасывает слишком старые, раскладывает остальные по каталогам
{год}/{год}-{MM} {Месяц}, разрешает конфликты имен и удаляет
опустевшие каталоги источника.
"""

import os
from typing import Dict, List, Optional
from datetime import datetime
from pathlib import Path

from .config import Config
from .logger import OrganizerLogger
from .file_ops import FileOps, FileOperationError, is_media_file
from .traversal import TreeVisitor, walk


MS_PER_DAY = 86400000
DAYS_PER_MONTH = 31


def _to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def _same_path(first: Path, second: Path) -> bool:
    return os.path.normcase(os.path.abspath(first)) == os.path.normcase(os.path.abspath(second))


class OrganizeStats:
    """Класс для хранения статистики запуска."""

    def __init__(self):
        self.scanned_files = 0
        self.media_files = 0
        self.moved_files = 0
        self.renamed_files = 0
        self.duplicate_files = 0
        self.skipped_files = 0
        self.failed_files = 0
        self.created_directories = 0
        self.removed_directories = 0
        self.start_time = None
        self.end_time = None
        self.errors: List[Dict] = []

    def add_error(self, path: Path, error: Exception):
        """Добавляет ошибку в список."""
        self.errors.append({
            'path': str(path),
            'error': str(error),
            'timestamp': datetime.now()
        })
        self.failed_files += 1

    def get_duration(self) -> Optional[float]:
        """Возвращает продолжительность запуска в секундах."""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    def to_dict(self) -> Dict:
        """Преобразует статистику в словарь."""
        return {
            'scanned_files': self.scanned_files,
            'media_files': self.media_files,
            'moved_files': self.moved_files,
            'renamed_files': self.renamed_files,
            'duplicate_files': self.duplicate_files,
            'skipped_files': self.skipped_files,
            'failed_files': self.failed_files,
            'created_directories': self.created_directories,
            'removed_directories': self.removed_directories,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration_seconds': self.get_duration(),
            'error_count': len(self.errors)
        }


class Organizer(TreeVisitor):
    """Основной класс раскладки файлов."""

    def __init__(self, config: Config, logger: OrganizerLogger,
                 file_ops: Optional[FileOps] = None, now: Optional[datetime] = None):
        """
        Инициализация.

        Args:
            config: Конфигурация приложения
            logger: Журнал запуска
            file_ops: Операции с файлами (по умолчанию создаются из config)
            now: Момент, от которого считается возраст файлов
        """
        self.config = config
        self.logger = logger
        self.file_ops = file_ops or FileOps(config.filter, logger)
        self.now = now or datetime.now()
        self.stats = OrganizeStats()

    def run(self) -> OrganizeStats:
        """
        Обходит каталог источника и раскладывает файлы.

        Returns:
            OrganizeStats: Статистика запуска
        """
        source_dir = self.config.paths.source_dir
        destination_dir = self.config.paths.destination_dir

        self.stats.start_time = datetime.now()
        self.logger.log_run_start(source_dir, destination_dir, self.config.filter.cutoff_months)

        # Каталог назначения внутри источника не обходим
        walk(source_dir, self, exclude=[destination_dir])

        self.stats.end_time = datetime.now()
        self.logger.log_run_end(self.stats)
        return self.stats

    def is_too_old(self, file_date: datetime) -> bool:
        """
        Проверяет, старше ли файл порога.

        Защищает от камер со сбитыми часами: такие файлы иначе
        попали бы в давно закрытые каталоги.
        """
        days_old = (_to_millis(self.now) - _to_millis(file_date)) // MS_PER_DAY
        return days_old > self.config.filter.cutoff_months * DAYS_PER_MONTH

    def visit_file(self, path: Path) -> None:
        """Обрабатывает один файл источника."""
        self.stats.scanned_files += 1

        if not is_media_file(path):
            self.logger.log_debug(f"Ignoring: {path}")
            return

        self.stats.media_files += 1

        try:
            file_date = self.file_ops.get_file_date(path)
        except FileOperationError as e:
            self._record_error(path, e)
            return

        if self.is_too_old(file_date):
            self.stats.skipped_files += 1
            self.logger.log_error(
                f"Skipping: {path.name} because the file is more than "
                f"{self.config.filter.cutoff_months} months old."
            )
            return

        try:
            month_folder = self._ensure_bucket(file_date)
        except FileOperationError as e:
            self._record_error(path, e)
            return

        target_path = month_folder / path.name

        if _same_path(path, target_path):
            self.logger.log_debug(f"Already in place: {path}")
            return

        if os.path.lexists(target_path):
            self._resolve_collision(path, target_path, month_folder)
        else:
            self._move(path, target_path, month_folder)

    def _ensure_bucket(self, file_date: datetime) -> Path:
        """Создает каталоги года и месяца, если их еще нет."""
        year_folder, month_folder = self.file_ops.get_bucket_paths(
            self.config.paths.destination_dir, file_date
        )
        for folder in (year_folder, month_folder):
            if self.file_ops.ensure_directory(folder):
                self.stats.created_directories += 1
        return month_folder

    def _resolve_collision(self, path: Path, target_path: Path, month_folder: Path) -> None:
        try:
            duplicate = self.file_ops.is_duplicate(path, target_path)
        except FileOperationError as e:
            self._record_error(path, e)
            return

        if duplicate:
            # Удаляется исходный файл, файл в каталоге назначения остается
            try:
                self.file_ops.delete_file(path)
            except FileOperationError as e:
                self._record_error(path, e)
                return
            self.stats.duplicate_files += 1
            self.logger.log(
                f"Deleting duplicate: {path.absolute()} (same as {target_path.absolute()})"
            )
            return

        unique_path = self.file_ops.get_unique_filename(month_folder, path.name)
        self.logger.log_warning(
            f"File already exists: {target_path.absolute()}, renaming {path.name} to {unique_path.name}"
        )
        if self._move(path, unique_path, month_folder):
            self.stats.renamed_files += 1

    def _move(self, path: Path, target_path: Path, month_folder: Path) -> bool:
        try:
            self.file_ops.move_file(path, target_path)
        except FileOperationError as e:
            self._record_error(path, e)
            return False

        self.stats.moved_files += 1
        self.logger.log(f"Moving: {path.name} to {month_folder.absolute()}")
        return True

    def leave_directory(self, path: Path, is_root: bool) -> None:
        """Удаляет опустевший каталог источника (кроме корня)."""
        if is_root:
            return

        try:
            if not self.file_ops.is_empty_directory(path):
                return
            self.file_ops.remove_directory(path)
        except FileOperationError as e:
            self._record_error(path, e)
            return

        self.stats.removed_directories += 1
        self.logger.log(f"Deleting directory: {path.absolute()}")

    def on_error(self, path: Path, error: OSError) -> None:
        self._record_error(path, FileOperationError(f"Could not read directory: {path} ({error})"))

    def _record_error(self, path: Path, error: Exception) -> None:
        self.stats.add_error(path, error)
        self.logger.log_error(str(error))


def organize(config: Config, logger: OrganizerLogger, now: Optional[datetime] = None) -> OrganizeStats:
    """
    Удобная функция: создает Organizer и выполняет запуск.

    Args:
        config: Конфигурация приложения
        logger: Журнал запуска
        now: Момент, от которого считается возраст файлов

    Returns:
        OrganizeStats: Статистика запуска
    """
    return Organizer(config, logger, now=now).run()
