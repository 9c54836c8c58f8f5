"""Short help texts for the generated service groups and commands.

Service keys are the service class name without ``Service``; method keys
are ``Service.method`` with the Python method name. Anything missing falls
back to the docstring, then to a generic sentence.
"""

from __future__ import annotations

from typing import Optional

SERVICE_DESCRIPTIONS: dict[str, str] = {
    "Batch": "Provides scanner batch operation data",
    "Hotspots": "Manages security hotspots",
    "Issues": "Manages code issues and their lifecycle",
    "L10N": "Manages localization and internationalization",
    "Languages": "Lists programming languages",
    "Monitoring": "Provides system monitoring data",
    "ProjectAnalyses": "Manages project analysis events",
    "Projects": "Manages SonarQube projects",
    "Push": "Manages server-sent events for SonarLint",
    "Qualityprofiles": "Manages quality profiles and rule activation",
    "Server": "Provides SonarQube server information",
    "Settings": "Manages SonarQube settings",
    "System": "Manages SonarQube system administration",
    "UserGroups": "Manages user groups",
    "Webservices": "Provides API metadata",
}

METHOD_DESCRIPTIONS: dict[str, str] = {
    # Batch
    "Batch.file": "Downloads a JAR file from the batch index",
    "Batch.index": "Lists JAR files for scanners",
    "Batch.project": "Returns project repository info",
    # Hotspots
    "Hotspots.add_comment": "Adds a comment to a hotspot",
    "Hotspots.assign": "Assigns a hotspot to a user",
    "Hotspots.change_status": "Changes a hotspot's status",
    "Hotspots.delete_comment": "Deletes a hotspot comment",
    "Hotspots.edit_comment": "Edits a hotspot comment",
    "Hotspots.list": "Lists hotspots for a project",
    "Hotspots.pull": "Pulls hotspot data for sync",
    "Hotspots.search": "Searches for security hotspots",
    "Hotspots.show": "Shows hotspot details",
    # Issues
    "Issues.add_comment": "Adds a comment to an issue",
    "Issues.assign": "Assigns or unassigns an issue",
    "Issues.authors": "Searches SCM accounts",
    "Issues.bulk_change": "Bulk changes up to 500 issues",
    "Issues.changelog": "Displays issue changelog",
    "Issues.component_tags": "Lists tags for component issues",
    "Issues.delete_comment": "Deletes an issue comment",
    "Issues.do_transition": "Performs an issue transition",
    "Issues.edit_comment": "Edits an issue comment",
    "Issues.list": "Lists issues for a project",
    "Issues.pull": "Pulls issue data for sync",
    "Issues.pull_taint": "Pulls taint vulnerability data",
    "Issues.reindex": "Triggers issue reindexing",
    "Issues.search": "Searches issues with filters",
    "Issues.set_severity": "Changes an issue's severity",
    "Issues.set_tags": "Sets tags on an issue",
    "Issues.set_type": "Changes an issue's type",
    "Issues.tags": "Lists rule tags",
    # L10N
    "L10N.index": "Returns localized messages",
    # Languages
    "Languages.list": "Lists supported languages",
    # Monitoring
    "Monitoring.metrics": "Returns monitoring metrics",
    # ProjectAnalyses
    "ProjectAnalyses.create_event": "Creates a project analysis event",
    "ProjectAnalyses.delete": "Deletes a project analysis",
    "ProjectAnalyses.delete_event": "Deletes an analysis event",
    "ProjectAnalyses.search": "Searches project analyses",
    "ProjectAnalyses.search_all": "Searches all project analyses",
    "ProjectAnalyses.update_event": "Updates an analysis event",
    # Projects
    "Projects.bulk_delete": "Deletes multiple projects in bulk",
    "Projects.create": "Creates a new project",
    "Projects.delete": "Deletes a project",
    "Projects.search": "Searches for projects",
    "Projects.search_my_projects": "Searches projects the user administers",
    "Projects.search_my_scannable_projects": "Searches scannable projects",
    "Projects.update_default_visibility": "Updates default project visibility",
    "Projects.update_key": "Updates a project key",
    "Projects.update_visibility": "Updates a project's visibility",
    # Push
    "Push.sonarlint_events": "Streams server-sent events for SonarLint",
    # Qualityprofiles
    "Qualityprofiles.activate_rule": "Activates a rule in a profile",
    "Qualityprofiles.backup": "Backs up a profile in XML format",
    "Qualityprofiles.deactivate_rule": "Deactivates a rule in a profile",
    "Qualityprofiles.search": "Searches quality profiles",
    # Server
    "Server.version": "Returns the SonarQube server version",
    # Settings
    "Settings.list_definitions": "Lists setting definitions",
    "Settings.reset": "Resets a setting to default",
    "Settings.set": "Sets a setting value",
    "Settings.values": "Returns setting values",
    # System
    "System.change_log_level": "Changes the system log level",
    "System.db_migration_status": "Gets DB migration status",
    "System.health": "Returns system health status",
    "System.info": "Returns system information",
    "System.liveness": "Checks system liveness",
    "System.logs": "Returns system log content",
    "System.migrate_db": "Triggers database migration",
    "System.ping": "Pings the server",
    "System.restart": "Restarts the SonarQube server",
    "System.status": "Returns server status",
    # UserGroups
    "UserGroups.add_user": "Adds a user to a group",
    "UserGroups.create": "Creates a user group",
    "UserGroups.delete": "Deletes a user group",
    "UserGroups.remove_user": "Removes a user from a group",
    "UserGroups.search": "Searches for user groups",
    "UserGroups.update": "Updates a user group",
    "UserGroups.users": "Lists users in a group",
    # Webservices
    "Webservices.list": "Lists web services and actions",
    "Webservices.response_example": "Returns a response example",
}


def _first_line(doc: Optional[str]) -> str:
    if not doc:
        return ""
    return doc.strip().splitlines()[0].strip()


def service_description(service_key: str, doc: Optional[str] = None) -> str:
    """Help text for a service group."""
    return SERVICE_DESCRIPTIONS.get(service_key) or _first_line(doc) or f"Commands for the {service_key} service"


def method_description(service_key: str, method: str, doc: Optional[str] = None) -> str:
    """Help text for a single command."""
    return (
        METHOD_DESCRIPTIONS.get(f"{service_key}.{method}")
        or _first_line(doc)
        or f"Call {service_key}.{method}"
    )
