class PlanGenerationError(Exception):
    """Raised when a plan could not be produced."""


class InvalidPlanError(PlanGenerationError):
    """The generator returned a plan that is malformed or has the wrong shape."""


class LLMUnavailableError(PlanGenerationError):
    """The text-generation service is not configured or did not answer."""


FAILED_PLAN_NOTICE = "Generation failed. Please try again."


class PlanFailedError(PlanGenerationError):
    """Generation failed and the plan record was marked ``failed``; ``record`` is the stored record."""

    def __init__(self, record, cause: Exception):
        super().__init__(str(cause) or cause.__class__.__name__)
        self.record = record
        self.cause = cause
