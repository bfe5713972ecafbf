# === FILE: site_harvest/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteHarvest.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

DEFAULT_CONTENT_SELECTORS: List[str] = ["main", "#__next > div", "#__next", "body"]
DEFAULT_STRIP_SELECTORS: List[str] = ["header"]


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: HttpUrl = Field(..., description="Стартовый URL; его origin ограничивает обход.")
    max_pages: int = Field(10, ge=1, description="Жесткий лимит по числу страниц.")
    output_dir: Path = Field(Path("output"), description="Каталог для текстовых файлов.")
    renderer: Literal["playwright", "static"] = Field(
        "playwright", description="Движок загрузки страниц."
    )
    headless: bool = Field(True, description="Запускать браузер без окна.")
    wait_until: Literal["load", "domcontentloaded", "networkidle"] = Field(
        "networkidle", description="Событие, после которого страница считается загруженной."
    )
    navigation_timeout: float = Field(30.0, gt=0, description="Таймаут навигации (секунд).")
    crawl_timeout: Optional[float] = Field(None, gt=0, description="Таймаут всего обхода (секунд).")
    user_agent: str = Field("SiteHarvest/0.1", min_length=1, description="Заголовок User-Agent.")
    content_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS),
        min_length=1,
        description="Селекторы основного содержимого в порядке приоритета.",
    )
    strip_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_STRIP_SELECTORS),
        description="Элементы, удаляемые перед извлечением текста.",
    )
    file_extension: str = Field(".txt", description="Расширение файлов-артефактов.")

    @field_validator("file_extension")
    def _check_extension(cls, v: str) -> str:
        if not v.startswith(".") or len(v) < 2:
            raise ValueError("file_extension must look like '.txt'")
        return v

    def with_overrides(self, **overrides: Any) -> CrawlerConfig:
        """Возвращает проверенную копию с заменёнными полями (None игнорируется)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlerConfig(**data)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_data(path: Union[str, Path, None]) -> dict[str, Any]:
    """Читает YAML или JSON без валидации схемы."""
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    data = read_config_data(path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise


__all__ = [
    "CrawlerConfig",
    "DEFAULT_CONTENT_SELECTORS",
    "DEFAULT_STRIP_SELECTORS",
    "load_config",
    "read_config_data",
]
