"""Configuration models for mdtasks.yml."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .task import KNOWN_STATUSES, PRIORITIES


class GitConfig(BaseModel):
    """Settings for the git branch workflow."""

    branch_prefix: str = Field(default="feature/", description="Prefix for task branches")
    main_branch: str = Field(default="main", min_length=1)
    remote: str = Field(default="origin", min_length=1)

    @field_validator("branch_prefix")
    @classmethod
    def validate_branch_prefix(cls, v: str) -> str:
        """Validate the prefix is usable in a git ref name."""
        if any(c.isspace() for c in v):
            raise ValueError("branch_prefix cannot contain whitespace")
        if ".." in v or v.startswith("/"):
            raise ValueError(f"branch_prefix '{v}' is not a valid ref prefix")
        return v


class DefaultsConfig(BaseModel):
    """Field values applied to newly created tasks."""

    status: str = Field(default="pending", min_length=1)
    priority: str = "medium"

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        """Validate the default status is one the workflow understands."""
        if v not in KNOWN_STATUSES:
            raise ValueError(f"Default status must be one of: {', '.join(KNOWN_STATUSES)}")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: str) -> str:
        """Validate the default priority is a recognized label."""
        if v not in PRIORITIES:
            raise ValueError(f"Default priority must be one of: {', '.join(PRIORITIES)}")
        return v


class MdtasksConfig(BaseModel):
    """Root configuration from mdtasks.yml."""

    version: int = 1
    task_root: str = Field(default="tasks", description="Relative path to tasks directory")
    git: GitConfig = Field(default_factory=GitConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("task_root")
    @classmethod
    def validate_task_root(cls, v: str) -> str:
        """Validate task_root is a relative path."""
        path = Path(v)
        if path.is_absolute():
            raise ValueError("task_root must be a relative path")
        # Check for path traversal attempts (e.g., "../other")
        try:
            resolved = Path().resolve() / path
            resolved.resolve().relative_to(Path().resolve())
        except ValueError as err:
            raise ValueError("task_root must be within the project directory") from err
        return v

    @classmethod
    def default(cls) -> "MdtasksConfig":
        """Return default configuration."""
        return cls()
