"""Exception hierarchy for cloudship."""


class CloudshipError(Exception):
    """Base exception for all cloudship errors."""


class ConfigError(CloudshipError):
    """Malformed deployment descriptor or failed merge."""


class UsageError(CloudshipError):
    """Nothing to work with: no project type detected or unknown forced type."""


class ExternalStepError(CloudshipError):
    """An external step (install, type generation, deploy) exited non-zero."""

    def __init__(self, step: str, exit_code: int) -> None:
        self.step = step
        self.exit_code = exit_code
        super().__init__(f"Step '{step}' failed with exit code {exit_code}")
