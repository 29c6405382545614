"""Generate command for creating default config."""

import logging
import sys
from pathlib import Path

import yaml

from ..models import MdtasksConfig
from ..services.config_service import ConfigService
from .output import error, info, success

logger = logging.getLogger(__name__)

CONFIG_FILE = ConfigService.CONFIG_FILE
DEFAULT_TASK_ROOT = "tasks"

# Header comments for generated file
CONFIG_HEADER = """\
# mdtasks configuration
#
# task_root: Relative path to the directory holding task documents.
#   Every .md file with front matter below it is a task.
#
# git:
#   branch_prefix: Prefix for task branches ("feature/" -> feature/001-write-docs)
#   main_branch: Branch that task branches start from and merge into
#   remote: Remote pulled from and pushed to
#
# defaults:
#   status: Status of new tasks (pending, active or done)
#   priority: Priority of new tasks (low, medium or high)

"""


def prompt_task_root() -> str:
    """Prompt user for task directory name."""
    # Non-interactive: use default
    if not sys.stdin.isatty():
        return DEFAULT_TASK_ROOT

    print(f"Enter task directory name (default: {DEFAULT_TASK_ROOT}): ", end="", flush=True)
    user_input = input().strip()
    return user_input if user_input else DEFAULT_TASK_ROOT


def _is_valid_task_root(name: str, project_root: Path) -> bool:
    """Validate task root name."""
    path = Path(name)

    # Must be relative
    if path.is_absolute():
        return False

    # Must resolve to within project_root
    try:
        resolved = (project_root / path).resolve()
        resolved.relative_to(project_root.resolve())
    except ValueError:
        return False

    return True


def generate_config_yaml(task_root: str = DEFAULT_TASK_ROOT) -> str:
    """Generate YAML config from the default MdtasksConfig model.

    Args:
        task_root: The task directory path to include in config
    """
    config_dict = MdtasksConfig.default().model_dump()
    config_dict["task_root"] = task_root

    yaml_content = yaml.dump(config_dict, default_flow_style=False, sort_keys=False)
    return CONFIG_HEADER + yaml_content


def run_generate(project_root: Path) -> int:
    """
    Generate default configuration.

    Args:
        project_root: Path to project root where mdtasks.yml will be created

    Returns:
        Exit code (0 = success, 1 = nothing to do)
    """
    config_created = False
    dir_created = False

    config_path = project_root / CONFIG_FILE

    if config_path.exists():
        info(f"Config exists: {config_path}")
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            data = {}
        task_root_name = data.get("task_root", DEFAULT_TASK_ROOT)
    else:
        task_root_name = prompt_task_root()

        if not _is_valid_task_root(task_root_name, project_root):
            error(f"Invalid task directory: {task_root_name}")
            return 1

        if not project_root.exists():
            project_root.mkdir(parents=True)

        config_path.write_text(generate_config_yaml(task_root_name))
        logger.info("Wrote %s", config_path)
        success(f"Generated config: {config_path}")
        config_created = True

    # Create task directory if it doesn't exist
    task_dir = project_root / task_root_name
    if not task_dir.exists():
        task_dir.mkdir(parents=True)
        success(f"Created directory: {task_dir}/")
        dir_created = True
    else:
        info(f"Directory exists: {task_dir}/")

    if not config_created and not dir_created:
        print("Nothing to generate.")
        return 1

    return 0
