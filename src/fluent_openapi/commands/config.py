"""Config commands -- view and modify the global configuration.

Provides the ``fluent-openapi config`` sub-command group for reading and
updating :class:`~fluent_openapi.models.GlobalConfig`: the default spec
source, the client settings used by ``call``, and the output format.
"""

from __future__ import annotations

import typer

from fluent_openapi.output import error, format_response, info


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        False, "--resolved", help="Apply env and project overrides before showing."
    ),
) -> None:
    """Show the current configuration.

    Example::

        fluent-openapi config show
        fluent-openapi --json config show --resolved
    """
    from fluent_openapi.config import get_config_dir, load_global_config, resolve_config

    config = resolve_config() if resolved else load_global_config()
    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'client.url')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the existing field's type (bool, int, float or
    str) and the result is validated before saving.

    Example::

        fluent-openapi config set default_spec ./swagger.json
        fluent-openapi config set client.url https://k8s.local
        fluent-openapi config set client.timeout 5
    """
    from fluent_openapi.config import load_global_config, save_global_config
    from fluent_openapi.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")

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
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    info(f"Set {key} = {coerced}")
