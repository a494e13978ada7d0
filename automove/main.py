"""
Главный модуль CLI интерфейса утилиты AutoMove.

Разбирает аргументы командной строки, проверяет каталоги, открывает
журнал и запускает раскладку файлов.
"""

import argparse
import sys
from typing import List, Optional

from .config import build_config, Config, ConfigError, LOG_MODES, TIME_SOURCES
from .logger import OrganizerLogger, LoggerSetupError
from .organizer import Organizer


class AutoMoveCLI:
    """Класс для обработки команды запуска."""

    def __init__(self):
        self.config: Optional[Config] = None
        self.logger: Optional[OrganizerLogger] = None
        self.verbose = False

    def setup(self, args: argparse.Namespace, cutoff_months: Optional[int]) -> bool:
        """
        Проверяет каталоги и открывает журнал.

        Args:
            args: Аргументы командной строки
            cutoff_months: Порог возраста в месяцах

        Returns:
            bool: True если инициализация успешна
        """
        source_dir, destination_dir = args.arguments[0], args.arguments[1]
        self.verbose = args.verbose
        try:
            self.config = build_config(
                source_dir,
                destination_dir,
                cutoff_months=cutoff_months,
                log_mode=args.log_mode,
                time_source=args.time_source,
                level='DEBUG' if args.verbose else 'INFO'
            )
            self.logger = OrganizerLogger(self.config.logging)
            return True

        except (FileNotFoundError, ConfigError, LoggerSetupError) as e:
            print(f"❌ Ошибка инициализации: {e}")
            return False

    def cmd_run(self) -> int:
        """
        Выполняет раскладку файлов.

        Ошибки отдельных файлов не влияют на код возврата: они видны
        только в журнале.

        Returns:
            int: Код возврата (0 - обход завершен, 1 - прерван)
        """
        try:
            organizer = Organizer(self.config, self.logger)
            organizer.run()
            return 0

        except KeyboardInterrupt:
            print("\n⚠️ Операция прервана пользователем")
            return 1
        except Exception as e:
            print(f"❌ Неожиданная ошибка: {e}")
            if self.verbose:
                import traceback
                traceback.print_exc()
            return 1
        finally:
            if self.logger:
                self.logger.close()


def create_parser() -> argparse.ArgumentParser:
    """
    Создает парсер аргументов командной строки.

    Returns:
        argparse.ArgumentParser: Настроенный парсер
    """
    parser = argparse.ArgumentParser(
        prog='automove',
        usage='%(prog)s [options] sourcePicturesDir destinationAutoSortDir [ageCutoffMonths]',
        description="Раскладка фотографий и видео по каталогам год/месяц",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:

  # Разобрать каталог с порогом возраста по умолчанию (6 месяцев)
  automove ~/Pictures/Incoming ~/Pictures/AutoSort

  # Порог возраста 12 месяцев, один журнал на все запуски
  automove ~/Pictures/Incoming ~/Pictures/AutoSort 12 --log-mode append

  # Раскладывать по времени изменения, а не создания
  automove ~/Pictures/Incoming ~/Pictures/AutoSort --time-source modified
        """
    )

    parser.add_argument(
        'arguments',
        nargs='*',
        metavar='ARG',
        help='sourcePicturesDir destinationAutoSortDir [ageCutoffMonths]'
    )
    parser.add_argument(
        '--log-mode',
        choices=LOG_MODES,
        default='timestamp',
        help='Файл журнала: новый на каждый запуск (timestamp), '
             'общий с дозаписью (append) или перезаписью (overwrite)'
    )
    parser.add_argument(
        '--time-source',
        choices=TIME_SOURCES,
        default='creation',
        help='Дата файла: время создания (creation) или изменения (modified)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Подробный вывод'
    )

    return parser


def parse_cutoff(parser: argparse.ArgumentParser, value: str) -> int:
    """Разбирает порог возраста; некорректное значение - ошибка использования."""
    try:
        cutoff_months = int(value)
    except ValueError:
        parser.error(f"ageCutoffMonths must be an integer: {value!r}")

    if cutoff_months < 0:
        parser.error(f"ageCutoffMonths must not be negative: {cutoff_months}")

    return cutoff_months


def main(argv: Optional[List[str]] = None) -> int:
    """Главная функция CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Неверное число аргументов - показываем справку и выходим без ошибки
    if len(args.arguments) not in (2, 3):
        parser.print_help()
        return 0

    cutoff_months = None
    if len(args.arguments) == 3:
        cutoff_months = parse_cutoff(parser, args.arguments[2])

    cli = AutoMoveCLI()
    if not cli.setup(args, cutoff_months):
        return 1

    return cli.cmd_run()


if __name__ == "__main__":
    sys.exit(main())
