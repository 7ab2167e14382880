"""Main entry point for the fxlive command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from fxlive.core.config.settings import ConfigManager
from fxlive.core.logging import configure_logging

from .formatters import create_formatter
from .rates import register as register_rate_commands

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def create_app() -> typer.Typer:
    """Create a Typer application instance for fxlive."""

    app = typer.Typer(add_completion=False, help="Live FX rates against a fixed base currency")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            help="Path to a TOML config file (defaults to ~/.fxlive/config.toml).",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Log level; overrides the configured one.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        if log_level is not None and log_level.strip().upper() not in _LOG_LEVELS:
            raise typer.BadParameter(
                f"Unknown log level '{log_level}'; expected one of {', '.join(sorted(_LOG_LEVELS))}",
                param_hint="--log-level",
            )
        normalized_format = format.strip().lower()
        try:
            # Validate formatter eagerly for immediate feedback on invalid options
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "config_path": config,
                "no_color": no_color,
            }
        )
        _configure_logging(config, log_level)

    register_rate_commands(app)
    return app


def _configure_logging(config_path: Path | None, level_name: str | None) -> None:
    settings = ConfigManager(config_path).get_config().logging
    level = (level_name or settings.level).strip().upper()
    if level not in _LOG_LEVELS:
        level = "INFO"
    if settings.file:
        configure_logging(level, file_output=True, file_path=settings.file)
    else:
        configure_logging(level)


app = create_app()
