"""sonarcli -- a typed SonarQube web API client and the CLI built on top of it.

The package has two halves. :mod:`sonarcli.sonar` is a conventional SDK:
a :class:`~sonarcli.sonar.SonarClient` exposing one service object per
SonarQube web service (``projects``, ``issues``, ``system``, ...), whose
methods take a pydantic option model and return typed responses. The CLI
half, :mod:`sonarcli.generator`, reflects over that SDK at startup and turns
every service method into a Typer sub-command, so new SDK methods show up on
the command line without any per-method plumbing.

Typical usage::

    sonar-cli --url http://sonar:9000 --token $TOKEN projects search --all
    sonar-cli -o table issues search --severities CRITICAL,MAJOR

Modules:
    app: Typer application and the console-script entry point.
    models: Pydantic models for configuration and command descriptors.
    config: XDG-aware configuration and connection settings resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
