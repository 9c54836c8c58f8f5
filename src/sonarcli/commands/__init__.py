"""Built-in CLI sub-commands for sonar-cli.

* :mod:`~sonarcli.commands.config` -- view and modify the global settings.

The SonarQube service commands are not declared here; they are generated
from the SDK by :mod:`sonarcli.generator.command_tree`.
"""
