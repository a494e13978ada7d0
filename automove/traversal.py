"""
Модуль обхода дерева каталогов.

Обход в глубину: файлы каталога передаются посетителю по мере чтения
списка, подкаталоги обходятся рекурсивно, а после обработки всех
записей посетитель получает сам каталог (для удаления пустых).
Порядок записей - порядок, в котором их вернула файловая система.
"""

import os
from pathlib import Path
from typing import Iterable, Set


class TreeVisitor:
    """Базовый посетитель: все действия по умолчанию ничего не делают."""

    def visit_file(self, path: Path) -> None:
        pass

    def leave_directory(self, path: Path, is_root: bool) -> None:
        pass

    def on_error(self, path: Path, error: OSError) -> None:
        pass


def _normalize(path: Path) -> str:
    return os.path.normcase(os.path.abspath(path))


def walk(directory: Path, visitor: TreeVisitor, exclude: Iterable[Path] = ()) -> None:
    """
    Обходит дерево каталогов, начиная с directory.

    Args:
        directory: Корень обхода
        visitor: Посетитель, выполняющий действия над файлами и каталогами
        exclude: Каталоги, в которые обход не заходит
    """
    excluded = {_normalize(path) for path in exclude}
    _walk(Path(directory), visitor, excluded, is_root=True)


def _walk(directory: Path, visitor: TreeVisitor, excluded: Set[str], is_root: bool) -> None:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        visitor.on_error(directory, e)
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            # Ссылки на каталоги не разворачиваем
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            visitor.on_error(path, e)
            continue

        if is_dir:
            if _normalize(path) in excluded:
                continue
            _walk(path, visitor, excluded, is_root=False)
        else:
            visitor.visit_file(path)

    visitor.leave_directory(directory, is_root)
