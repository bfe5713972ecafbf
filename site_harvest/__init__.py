# site_harvest/__init__.py
"""
SiteHarvest package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; the name `cli` stays bound to the submodule
from site_harvest.cli import cli as main_cli  # noqa: E402
