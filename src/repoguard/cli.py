"""Administrative command-line interface."""

from __future__ import annotations

from pathlib import Path

import click
import structlog
from safir.click import display_help

from .config import Config
from .configuration.domains import DEFAULT_DOMAINS, SharedSettingsProvider
from .configuration.providers import FileConfigurationProvider
from .configuration.schemas import (
    SchemaLoader,
    generate_schema,
    qualified_name,
)
from .configuration.shared import SharedConfigurationService
from .constants import CONFIG_PATH
from .exceptions import SharedSettingsUpdateError
from .factory import ProcessContext
from .services.failure import FailureService

__all__ = [
    "generate_schemas",
    "help",
    "init",
    "main",
    "validate_configuration",
]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s")
def main() -> None:
    """Administrative command-line interface for repoguard."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic)


@main.command()
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path, file_okay=False),
    required=True,
    help="Directory in which to write the schemas.",
)
def generate_schemas(*, output_dir: Path) -> None:
    """Generate the JSON schemas of the shared configuration domains.

    One file is written per settings type, named after the fully-qualified
    name of the type. Ship these files in ``repoguard.schemas`` to avoid
    generating schemas at startup.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    for settings_type in DEFAULT_DOMAINS:
        path = output_dir / f"{qualified_name(settings_type)}.json"
        path.write_text(generate_schema(settings_type))
        click.echo(f"Wrote {path}")


@main.command()
@click.argument(
    "path", type=click.Path(path_type=Path, exists=True, dir_okay=False)
)
def validate_configuration(*, path: Path) -> None:
    """Check a shared configuration document.

    Every domain in the document is validated and all problems are reported.
    The document is not modified.
    """
    logger = structlog.get_logger("repoguard")
    service = SharedConfigurationService(
        settings_provider=SharedSettingsProvider(),
        configuration_provider=FileConfigurationProvider(
            path, logger, mutable=False
        ),
        known_schemas=SchemaLoader().load_generated_schemas(),
        failure_service=FailureService(logger),
        logger=logger,
    )
    try:
        service.load_from_document(service.fetch_configuration())
    except SharedSettingsUpdateError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{path} is valid")


@main.command()
@click.option(
    "--config-path",
    envvar="REPOGUARD_CONFIG_PATH",
    type=click.Path(path_type=Path),
    default=Path(CONFIG_PATH),
    help="Application configuration file.",
)
def init(*, config_path: Path) -> None:
    """Initialize the shared configuration.

    Loads the stored shared configuration, writing it with the default
    settings if it does not exist yet.
    """
    config = Config.from_file(config_path)
    config.configure_logging()
    logger = structlog.get_logger("repoguard")
    logger.debug("Initializing shared configuration")
    try:
        context = ProcessContext.from_config(config)
    except SharedSettingsUpdateError as e:
        raise click.ClickException(str(e)) from e
    shared = context.shared_configuration
    names = ", ".join(shared.get_domain_names())
    click.echo(f"Loaded {names} from {shared.get_provider_name()}")
