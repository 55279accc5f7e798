class BatchRulesError(Exception):
    """Base exception for the batch rules package."""

    pass


class RulesetLoadError(BatchRulesError):
    """Raised when a ruleset override file cannot be read or fails validation."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load rulesets from '{path}': {reason}")
