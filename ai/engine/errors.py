class InferenceCoreError(Exception):
    """Base class for errors raised by the summarize / answer pipeline."""

    pass


class CapabilityUnavailable(InferenceCoreError):
    """Raised before any inference call when the model cannot be used."""

    def __init__(self, state):
        from .capability import describe

        self.state = state
        self.reason = state.reason
        super().__init__(describe(state))


class InferenceFailure(InferenceCoreError):
    """Raised by an inference provider when a generate call fails."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class MissingInput(InferenceCoreError):
    """Raised when required text (content or question) is empty."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"No {field} provided")
