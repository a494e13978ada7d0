"""
Модуль для операций с файловой системой.

Определяет тип файла по расширению, читает даты создания и изменения,
строит каталоги назначения вида {YYYY}/{YYYY}-{MM} {Month} и выполняет
перемещение и удаление файлов.
"""

import os
import sys
import shutil
from pathlib import Path
from typing import Tuple
from datetime import datetime

from .config import FilterConfig
from .logger import OrganizerLogger


MEDIA_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.mov', '.avi')

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
)


class FileOperationError(Exception):
    """Исключение для ошибок операций с файлами."""
    pass


def is_media_file(path: Path) -> bool:
    """Файл считается медиафайлом по окончанию имени, без учета регистра."""
    return Path(path).name.lower().endswith(MEDIA_EXTENSIONS)


def get_month_folder_name(dt: datetime) -> str:
    """
    Возвращает имя каталога месяца.

    Args:
        dt: Дата файла

    Returns:
        str: Имя вида "2024-01 January"
    """
    return f"{dt.year}-{dt.month:02d} {MONTH_NAMES[dt.month - 1]}"


def split_extension(filename: str) -> Tuple[str, str]:
    """Делит имя на основу и расширение (расширение с точкой или пустое)."""
    name_parts = filename.rsplit('.', 1)
    if len(name_parts) == 2:
        return name_parts[0], '.' + name_parts[1]
    return filename, ''


class FileOps:
    """Класс для операций с файловой системой."""

    def __init__(self, filter_config: FilterConfig, logger: OrganizerLogger):
        """
        Инициализация операций с файлами.

        Args:
            filter_config: Параметры отбора (источник даты файла)
            logger: Журнал запуска
        """
        self.filter_config = filter_config
        self.logger = logger

    def _stat(self, path: Path) -> os.stat_result:
        try:
            return os.stat(path)
        except OSError as e:
            raise FileOperationError(f"Could not read attributes of {path}: {e}")

    def get_creation_time(self, path: Path) -> datetime:
        """
        Возвращает время создания файла.

        Используется st_birthtime, если платформа его предоставляет
        (macOS, BSD, Windows на Python 3.12+). Иначе на Windows берется
        st_ctime, на остальных системах - время изменения.

        Raises:
            FileOperationError: Если атрибуты не удалось прочитать
        """
        stat = self._stat(path)

        birth_time = getattr(stat, 'st_birthtime', None)
        if birth_time is not None:
            return datetime.fromtimestamp(birth_time)

        if sys.platform == 'win32':
            return datetime.fromtimestamp(stat.st_ctime)

        return datetime.fromtimestamp(stat.st_mtime)

    def get_modified_millis(self, path: Path) -> int:
        """Время изменения файла в миллисекундах."""
        return self._stat(path).st_mtime_ns // 1_000_000

    def get_file_date(self, path: Path) -> datetime:
        """
        Возвращает дату, по которой файл раскладывается по каталогам.

        Args:
            path: Путь к файлу

        Returns:
            datetime: Время создания или изменения, в зависимости от настройки
        """
        if self.filter_config.time_source == 'modified':
            return datetime.fromtimestamp(self.get_modified_millis(path) / 1000)
        return self.get_creation_time(path)

    def get_bucket_paths(self, destination_dir: Path, dt: datetime) -> Tuple[Path, Path]:
        """
        Получает пути к каталогам года и месяца.

        Args:
            destination_dir: Корень каталога назначения
            dt: Дата файла

        Returns:
            Tuple[Path, Path]: (каталог года, каталог месяца)
        """
        year_folder = Path(destination_dir) / str(dt.year)
        month_folder = year_folder / get_month_folder_name(dt)
        return year_folder, month_folder

    def ensure_directory(self, directory: Path) -> bool:
        """
        Создает каталог, если его нет.

        Returns:
            bool: True, если каталог был создан в этом вызове

        Raises:
            FileOperationError: Если каталог не удалось создать
        """
        try:
            if directory.is_dir():
                return False
            directory.mkdir()
        except OSError as e:
            raise FileOperationError(f"Could not create directory: {directory.absolute()} ({e})")

        self.logger.log(f"Creating directory: {directory.absolute()}")
        return True

    def is_duplicate(self, source_path: Path, target_path: Path) -> bool:
        """Файлы считаются дубликатами при равном времени изменения."""
        return self.get_modified_millis(source_path) == self.get_modified_millis(target_path)

    def get_unique_filename(self, directory: Path, filename: str) -> Path:
        """
        Получает свободное имя файла в каталоге, добавляя _0, _1, ...
        перед расширением.

        Args:
            directory: Каталог для проверки
            filename: Исходное имя файла

        Returns:
            Path: Путь со свободным именем
        """
        base_name, extension = split_extension(filename)

        counter = 0
        while True:
            new_path = directory / f"{base_name}_{counter}{extension}"
            if not os.path.lexists(new_path):
                return new_path
            counter += 1

    def move_file(self, source_path: Path, target_path: Path) -> Path:
        """
        Перемещает файл.

        Raises:
            FileOperationError: Если перемещение не удалось
        """
        try:
            shutil.move(str(source_path), str(target_path))
        except OSError as e:
            raise FileOperationError(f"Could not move {source_path} to {target_path}: {e}")

        self.logger.log_debug(f"Renamed {source_path} -> {target_path}")
        return target_path

    def delete_file(self, path: Path) -> None:
        """
        Удаляет файл.

        Raises:
            FileOperationError: Если файл не удалось удалить
        """
        try:
            path.unlink()
        except OSError as e:
            raise FileOperationError(f"Could not delete file: {path.absolute()} ({e})")

    def is_empty_directory(self, directory: Path) -> bool:
        try:
            with os.scandir(directory) as entries:
                return next(entries, None) is None
        except OSError as e:
            raise FileOperationError(f"Could not list directory: {directory} ({e})")

    def remove_directory(self, directory: Path) -> None:
        """
        Удаляет пустой каталог.

        Raises:
            FileOperationError: Если каталог не удалось удалить
        """
        try:
            directory.rmdir()
        except OSError as e:
            raise FileOperationError(f"Could not delete directory: {directory.absolute()} ({e})")
