"""Config commands -- view and modify the global configuration.

Provides the ``sonar-cli config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~sonarcli.models.GlobalConfig`): the default server URL, request
timeout and output preferences. Credentials are never stored here.
"""

from __future__ import annotations

import typer

from sonarcli.output import error, format_output, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Example::

        sonar-cli config show
        sonar-cli -o yaml config show
    """
    from sonarcli.config import config_file_path, load_global_config

    config = load_global_config()
    info(f"Config file: {config_file_path()}")
    format_output(config)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (dot notation, e.g., 'output.format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The value is coerced to the type of
    the existing field (bool, int, float or str) and the result is validated
    against :class:`~sonarcli.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is invalid, the value
            cannot be coerced, or validation fails.

    Example::

        sonar-cli config set url https://sonar.example.com/api/
        sonar-cli config set output.format table
        sonar-cli config set timeout 60
    """
    from pydantic import ValidationError

    from sonarcli.config import load_global_config, save_global_config
    from sonarcli.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object = value
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = type(current)(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=2) from None

    target[final_key] = coerced

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip the confirmation prompt."),
) -> None:
    """Reset configuration to defaults.

    Example::

        sonar-cli config reset
        sonar-cli config reset --force
    """
    from sonarcli.config import save_global_config
    from sonarcli.models import GlobalConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")


@config_app.command("path")
def config_path() -> None:
    """Print the path of the configuration file."""
    from sonarcli.config import config_file_path

    print_data(str(config_file_path()))
