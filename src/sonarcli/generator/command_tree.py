"""Register a Typer command for every SDK service method.

This is the core of sonar-cli. It reflects over :class:`SonarClient` and
turns the SDK into a two-level command tree::

    sonar-cli <service> <method> [--flag value ...] [--all]

**Algorithm summary**

1. Every annotated attribute of the client whose type is a
   :class:`~sonarcli.sonar.service.Service` becomes a group named after the
   attribute in kebab-case (``project_analyses`` -> ``project-analyses``).
2. Every public method of the service class, except the ``validate*``
   helpers, is described once: return shape, option type, response type,
   pagination eligibility and streaming flag
   (:class:`~sonarcli.models.MethodDescriptor`).
3. The option type's tagged fields are bound to flags on a throwaway
   instance, giving the flag names, kinds and help.
4. Each leaf command is a dynamically generated function whose signature
   lists those flags as :func:`typer.Option` parameters (plus ``--all`` for
   paginated commands), so Typer and Click parse and validate them.
5. At run time the command builds a fresh option instance, applies the
   parsed values, calls the method through the invoker, the streaming path
   or the pagination driver, and hands the value to the output layer.
"""

from __future__ import annotations

import inspect
import typing
from typing import Any, Callable, Optional

import typer
from pydantic import BaseModel

from sonarcli.config import require_url, resolve_settings
from sonarcli.exceptions import FlagValueError, ServiceNotFoundError
from sonarcli.generator.descriptions import method_description, service_description
from sonarcli.generator.flags import FlagSet, bind_flags, kebab_case, typer_option_for
from sonarcli.generator.invoker import invoke_method, invoke_streaming
from sonarcli.generator.pagination import has_pagination, paginate_all, response_has_paging
from sonarcli.generator.shapes import classify_method, option_type_of, response_type_of
from sonarcli.models import ConnectionSettings, MethodDescriptor, ReturnShape
from sonarcli.output import binary_stdout, debug, format_output, info
from sonarcli.sonar.client import SonarClient
from sonarcli.sonar.service import Service

# Methods whose response body is an open event stream, as ``service.method``.
STREAMING_METHODS = frozenset({"push.sonarlint_events"})

SKIP_PREFIXES = ("validate",)

ClientResolver = Callable[[typer.Context], Any]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def register_all_commands(
    app: typer.Typer,
    client_type: type = SonarClient,
    client_resolver: Optional[ClientResolver] = None,
) -> list[MethodDescriptor]:
    """Attach one group per service and one command per method to *app*.

    Args:
        app: The root :class:`typer.Typer` application.
        client_type: Class whose annotated :class:`Service` attributes are
            exposed. Defaults to :class:`SonarClient`.
        client_resolver: Called with the Typer context when a command runs
            and must return the client instance. Defaults to
            :func:`default_client_resolver`, which builds a
            :class:`SonarClient` from the global options.

    Returns:
        The descriptors of every registered command, in registration order.
    """
    resolver = client_resolver or default_client_resolver
    registered: list[MethodDescriptor] = []

    for attr, service_type in discover_services(client_type):
        descriptors = describe_service(attr, service_type)
        if not descriptors:
            debug(f"{attr}: no commands, group skipped")
            continue

        service_key = _service_key(service_type)
        group = typer.Typer(
            name=kebab_case(attr),
            help=service_description(service_key, service_type.__doc__),
            no_args_is_help=True,
        )
        for descriptor in descriptors:
            cmd_fn = _build_command_function(descriptor, resolver)
            help_text = method_description(service_key, descriptor.method, descriptor.func.__doc__)
            group.command(name=kebab_case(descriptor.method), help=help_text)(cmd_fn)
            registered.append(descriptor)
        app.add_typer(group)

    return registered


def default_client_resolver(ctx: typer.Context) -> SonarClient:
    """Build the :class:`SonarClient` once per invocation from the root context.

    The root callback stores the resolved :class:`ConnectionSettings` under
    ``ctx.obj["settings"]``. The client is cached in ``ctx.obj["client"]``
    and closed when the root context closes.

    Raises:
        ConfigError: If no server URL was configured.
    """
    root = ctx.find_root()
    if not isinstance(root.obj, dict):
        root.obj = {}
    state: dict[str, Any] = root.obj

    client = state.get("client")
    if client is None:
        settings: ConnectionSettings = state.get("settings") or resolve_settings()
        client = SonarClient(
            url=require_url(settings),
            token=settings.token,
            username=settings.username,
            password=settings.password,
            timeout=settings.timeout,
        )
        state["client"] = client
        root.call_on_close(client.close)
    return client


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def discover_services(client_type: type) -> list[tuple[str, type[Service]]]:
    """Return ``(attribute, service class)`` pairs in declaration order."""
    services: list[tuple[str, type[Service]]] = []
    for attr, annotation in typing.get_type_hints(client_type).items():
        if attr.startswith("_"):
            continue
        if isinstance(annotation, type) and issubclass(annotation, Service):
            services.append((attr, annotation))
    return services


def describe_service(attr: str, service_type: type) -> list[MethodDescriptor]:
    """Describe every command-eligible method of *service_type*."""
    descriptors: list[MethodDescriptor] = []
    for name, func in inspect.getmembers(service_type, inspect.isfunction):
        if name.startswith("_") or name.startswith(SKIP_PREFIXES):
            continue
        descriptor = describe_method(attr, service_type, name, func)
        if descriptor is not None:
            descriptors.append(descriptor)
    return descriptors


def describe_method(
    attr: str,
    service_type: type,
    name: str,
    func: Callable[..., Any],
) -> Optional[MethodDescriptor]:
    """Build the :class:`MethodDescriptor` for one method.

    Returns ``None`` for methods the CLI cannot call: more than one
    argument, or an argument that is not an option model.
    """
    params = [p for p in inspect.signature(func).parameters if p != "self"]
    option_type = option_type_of(func)
    if len(params) > 1 or (params and not _is_option_model(option_type)):
        debug(f"{attr}.{name}: unsupported signature, skipped")
        return None

    response_type = response_type_of(func)
    return MethodDescriptor(
        service=attr,
        service_type=_service_key(service_type),
        method=name,
        option_type=option_type if params else None,
        response_type=response_type,
        shape=classify_method(func),
        paginated=has_pagination(option_type) and response_has_paging(response_type),
        streaming=f"{attr}.{name}" in STREAMING_METHODS,
        func=func,
    )


def _is_option_model(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, BaseModel)


def _service_key(service_type: type) -> str:
    name = service_type.__name__
    return name[: -len("Service")] if name.endswith("Service") else name


# ---------------------------------------------------------------------------
# Dynamic command function builder
# ---------------------------------------------------------------------------


def _build_command_function(
    descriptor: MethodDescriptor,
    resolver: ClientResolver,
) -> Callable[..., Any]:
    """Generate the Typer callback for *descriptor*.

    The function source is built as a string, compiled, and executed into a
    namespace so that :mod:`inspect` (which Typer relies on) sees one
    keyword parameter per flag. The generated body only gathers the parsed
    values by flag name and delegates to :func:`_run_command`.
    """
    flag_set = FlagSet()
    if descriptor.option_type is not None:
        bind_flags(flag_set, descriptor.option_type())
    with_all = descriptor.paginated and "all" not in flag_set

    namespace: dict[str, Any] = {"_ann_ctx": typer.Context}
    sig_parts = ["ctx: _ann_ctx"]
    value_parts: list[str] = []

    for idx, binding in enumerate(flag_set):
        annotation, default = typer_option_for(binding)
        namespace[f"_ann_opt_{idx}"] = annotation
        namespace[f"_default_opt_{idx}"] = default
        sig_parts.append(f"opt_{idx}: _ann_opt_{idx} = _default_opt_{idx}")
        value_parts.append(f"{binding.name!r}: opt_{idx}")

    if with_all:
        namespace["_ann_all"] = bool
        namespace["_default_all"] = typer.Option(
            False,
            "--all",
            help="Fetch every page and merge the results; overrides --page and --page-size.",
        )
        sig_parts.append("fetch_all: _ann_all = _default_all")

    func_name = f"_cmd_{descriptor.service}_{descriptor.method}"
    source = (
        f"def {func_name}({', '.join(sig_parts)}):\n"
        f"    return _run(ctx, {{{', '.join(value_parts)}}}, {'fetch_all' if with_all else 'False'})\n"
    )

    def _run(ctx: typer.Context, values: dict[str, Any], fetch_all: bool) -> None:
        _run_command(descriptor, resolver, ctx, values, fetch_all)

    namespace["_run"] = _run

    code = compile(source, f"<sonar-cli:{descriptor.key}>", "exec")
    exec(code, namespace)  # noqa: S102 -- controlled code generation
    fn = namespace[func_name]
    fn.__doc__ = descriptor.func.__doc__
    return fn


def _run_command(
    descriptor: MethodDescriptor,
    resolver: ClientResolver,
    ctx: typer.Context,
    values: dict[str, Any],
    fetch_all: bool,
) -> None:
    client = resolver(ctx)
    service = getattr(client, descriptor.service, None)
    if service is None:
        raise ServiceNotFoundError(f"service {descriptor.service!r} not found on client")

    opt: Optional[BaseModel] = None
    if descriptor.option_type is not None:
        opt = descriptor.option_type()
        flag_set = FlagSet()
        bind_flags(flag_set, opt)
        try:
            flag_set.apply(values)
        except FlagValueError as exc:
            raise typer.BadParameter(str(exc), ctx=ctx) from exc

    if descriptor.streaming:
        invoke_streaming(service, descriptor.method, opt, binary_stdout())
        return

    if fetch_all and descriptor.paginated and opt is not None:
        value = paginate_all(service, descriptor.method, opt, descriptor.shape, descriptor.response_type)
        format_output(value)
        return

    value, response = invoke_method(service, descriptor.method, opt, descriptor.shape, descriptor.has_option)
    if descriptor.shape is ReturnShape.NO_BODY and response is not None:
        info(f"{descriptor.key}: HTTP {response.status_code}")
    format_output(value)
