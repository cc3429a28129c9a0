"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that halt the run."""

    error_code = "STAGE_ERROR"


class MissingRequiredField(PipelineError):
    """Raised when a report row has no country name."""

    error_code = "MISSING_REQUIRED_FIELD"

    def __init__(self, field: str, context: str | None = None) -> None:
        self.field = field
        self.context = context
        message = f"Missing required field: {field}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
