"""Generate command for creating a starter scaffolder.yml."""

import logging
from pathlib import Path

import yaml

from ..models import BitbucketServerIntegrationConfig, ScaffolderConfig
from .output import error, info, success

logger = logging.getLogger(__name__)

CONFIG_HEADER = """\
# scaffolder configuration
#
# integrations.bitbucketServer: one entry per Bitbucket Server instance
#   host:       Host as it appears in repoUrl (e.g. bitbucket.mycompany.com)
#   apiBaseUrl: REST API base (default: https://<host>/rest/api/1.0)
#   token:      Personal access token with project admin rights.
#               Optional; a token passed with --token takes precedence.
#
# scaffolder.defaultAuthor: commit author when the template sets none
# scaffolder.defaultCommitMessage: commit message when the template sets none
#
# Example:
#   integrations:
#     bitbucketServer:
#       - host: bitbucket.mycompany.com
#         token: <token>
#   scaffolder:
#     defaultAuthor:
#       name: Platform Team
#       email: platform@mycompany.com
#     defaultCommitMessage: Initial commit from template

"""


def generate_config_yaml(host: str | None = None) -> str:
    """Generate YAML config from the ScaffolderConfig model.

    Args:
        host: Optional Bitbucket Server host to add as an integration entry
    """
    config = ScaffolderConfig.default()
    if host:
        config.integrations.bitbucket_server.append(BitbucketServerIntegrationConfig(host=host))

    config_dict = config.model_dump(by_alias=True, exclude_none=True)
    # Empty defaults add noise to a starter file
    if not config_dict["scaffolder"]["defaultAuthor"]:
        del config_dict["scaffolder"]["defaultAuthor"]
    if not config_dict["scaffolder"]:
        del config_dict["scaffolder"]

    yaml_content = yaml.dump(config_dict, default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + yaml_content


def run_generate(config_path: Path, host: str | None = None) -> int:
    """
    Write a starter configuration file.

    Args:
        config_path: Where scaffolder.yml will be created
        host: Optional Bitbucket Server host to pre-fill

    Returns:
        Exit code (0 = success, 1 = nothing to do or invalid host)
    """
    if config_path.exists():
        info(f"Config exists: {config_path}")
        print("Nothing to generate.")
        return 1

    try:
        content = generate_config_yaml(host)
    except ValueError as e:
        error(f"Invalid host: {e}")
        return 1

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content)
    logger.info("Wrote %s", config_path)
    success(f"Generated config: {config_path}")
    return 0
