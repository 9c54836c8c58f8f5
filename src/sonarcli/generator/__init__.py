"""CLI generator -- expose every SDK service method as a Typer command.

Typical usage::

    import typer
    from sonarcli.generator import register_all_commands

    app = typer.Typer()
    register_all_commands(app)
    app()

Sub-modules:

* :mod:`~sonarcli.generator.shapes` -- Classify methods by their return
  annotation.
* :mod:`~sonarcli.generator.invoker` -- Call methods by name and unwrap
  their results, including the streaming path.
* :mod:`~sonarcli.generator.flags` -- Bind option-model fields to flags.
* :mod:`~sonarcli.generator.pagination` -- Fetch and merge every page of a
  paginated method.
* :mod:`~sonarcli.generator.command_tree` -- Discover services and
  register the generated commands.
* :mod:`~sonarcli.generator.descriptions` -- Help texts for groups and
  commands.
"""

from sonarcli.generator.command_tree import register_all_commands
from sonarcli.generator.flags import FlagBinding, FlagSet, bind_flags, kebab_case, pascal_to_kebab
from sonarcli.generator.invoker import Invocation, invoke_method, invoke_streaming
from sonarcli.generator.pagination import paginate_all
from sonarcli.generator.shapes import classify_method

__all__ = [
    "FlagBinding",
    "FlagSet",
    "Invocation",
    "bind_flags",
    "classify_method",
    "invoke_method",
    "invoke_streaming",
    "kebab_case",
    "paginate_all",
    "pascal_to_kebab",
    "register_all_commands",
]
