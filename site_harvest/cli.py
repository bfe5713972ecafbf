# === FILE: site_harvest/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteHarvest через командную строку.

Команды:
  crawl     Обойти сайт и сохранить текст страниц
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда crawl опции:
  URL                 Стартовый URL (override start_url)
  --limit INT         Макс. число страниц (override max_pages)
  --output DIR        Каталог для файлов (override output_dir)
  --renderer NAME     playwright | static
  --json PATH         Сохранить JSON-сводку в файл
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Дополнительно:
  --version, -v       Показать версию SiteHarvest

Пример:
  site-harvest crawl https://nextjs.org --limit 200 --output output
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from site_harvest import __version__
from site_harvest.config import CrawlerConfig, load_config
from site_harvest.engine import start_crawl
from site_harvest.logger import init_logging
from site_harvest.report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
DEFAULT_CONFIG = Path("configs/default.yaml")


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _build_config(config_path, **overrides) -> CrawlerConfig:
    """Конфиг из файла; без файла (и без явного --config) только из опций CLI."""
    if config_path is not None or DEFAULT_CONFIG.is_file():
        return load_config(config_path or DEFAULT_CONFIG, **overrides)
    if overrides.get('start_url') is None:
        raise click.UsageError('Укажите URL или файл конфигурации (--config).')
    return CrawlerConfig(**{k: v for k, v in overrides.items() if v is not None})


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteHarvest, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON (default: configs/default.yaml).'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд SiteHarvest CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option(
    '--limit', '-l', 'limit',
    type=click.IntRange(min=1),
    default=None,
    help='Макс. число страниц (override max_pages)'
)
@click.option(
    '--output', '-o', 'output_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог для текстовых файлов (override output_dir)'
)
@click.option(
    '--renderer', '-r', 'renderer',
    default=None,
    type=click.Choice(['playwright', 'static']),
    help='Движок загрузки страниц'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-сводку обхода в файл'
)
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, url, limit, output_dir, renderer, json_output, crawl_timeout):
    """Обойти сайт и сохранить текст каждой страницы."""
    try:
        cfg = _build_config(
            ctx.obj['config_path'],
            start_url=url,
            max_pages=limit,
            output_dir=output_dir,
            renderer=renderer,
        )
    except click.UsageError:
        raise
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo(f'Starting crawl: {cfg.start_url} (max {cfg.max_pages} pages)')
    try:
        result = asyncio.run(start_crawl(cfg, timeout=crawl_timeout))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout or cfg.crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    click.echo(
        f'Crawling completed. Total pages collected: {result.page_count} '
        f'(visited {len(result.visited)}, failed {len(result.failed)})'
    )

    if json_output:
        try:
            saved_json = render_json(result, json_output)
            click.echo(f'JSON report: {saved_json}')
        except OSError as e:
            print_error(f'Ошибка при сохранении JSON: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.pass_context
def show_config(ctx, url):
    """Показать текущую конфигурацию в JSON."""
    try:
        cfg = _build_config(ctx.obj['config_path'], start_url=url)
    except click.UsageError:
        raise
    except (OSError, ValueError, TypeError, ValidationError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
