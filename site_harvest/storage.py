# File: site_harvest/storage.py
"""site_harvest.storage: сохранение извлечённого текста страниц в файлы.

Имя файла выводится из URL детерминированно. Разные URL, дающие одинаковое
имя (``/a-b`` и ``/a_b``), перезаписывают один и тот же файл.
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Union

from site_harvest.errors import WriteError
from site_harvest.logger import get_logger

__all__ = ["ArtifactWriter", "url_to_filename", "format_artifact"]

logger = get_logger("storage")

_SCHEME_RE = re.compile(r"^https?://")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def url_to_filename(url: str, extension: str = ".txt") -> str:
    """``https://Example.test/docs?x=1`` -> ``example_test_docs_x_1.txt``."""
    stem = _NON_ALNUM_RE.sub("_", _SCHEME_RE.sub("", url))
    return stem.lower() + extension


def format_artifact(url: str, content: str) -> str:
    """Текст файла: URL источника, пустая строка, затем обрезанное содержимое."""
    return f"URL: {url}\n\nContent:\n{content.strip()}"


class ArtifactWriter:
    """Пишет по одному текстовому файлу на страницу в ``output_dir``."""

    def __init__(self, output_dir: Union[str, Path], extension: str = ".txt") -> None:
        self.output_dir = Path(output_dir)
        self.extension = extension

    def ensure_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def path_for(self, url: str) -> Path:
        return self.output_dir / url_to_filename(url, self.extension)

    async def save(self, url: str, content: str) -> Path:
        """Записывает артефакт; OSError и ошибки кодировки превращаются в WriteError."""
        path = self.path_for(url)
        try:
            data = format_artifact(url, content).encode("utf-8")
            await asyncio.to_thread(path.write_bytes, data)
        except (OSError, UnicodeError) as exc:
            raise WriteError(url, path, exc) from exc
        return path
