# site_harvest/report.py

"""
Генерация JSON-отчёта об обходе.
"""
import json
from pathlib import Path

from site_harvest.crawler.crawler import CrawlResult


def render_json(result: CrawlResult, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Сохраняет сводку обхода (посещённые, сохранённые и упавшие URL) в JSON.

    :param result: объект CrawlResult
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output


__all__ = ["render_json"]
