"""Exception taxonomy for the analysis pipeline.

Fatal errors propagate out of ``run_analysis``; navigation and extraction
errors are recovered per page by the analyzer.
"""


class AnalysisError(Exception):
    """Base class for every pipeline error."""

    def __init__(self, message: str, debug: dict = None):
        super().__init__(message)
        self.message = message
        self.debug = debug or {}


class ConfigurationError(AnalysisError):
    """A required backend setting (e.g. the Browserless token) is missing."""


class InputError(AnalysisError):
    """The request did not name any page to analyse."""


class NavigationError(AnalysisError):
    """A single page failed to load."""


class LoginError(AnalysisError):
    """The login form was not found or verification reported failure."""


class ExtractionError(AnalysisError):
    """Evaluating the extraction script failed for a page."""


class EmptyResultError(AnalysisError):
    """No features were detected on any analysed page."""


class AnalysisTimeoutError(AnalysisError):
    """The request deadline passed before synthesis could run."""
