"""Exception hierarchy for buildlimits."""


class BuildLimitsError(Exception):
    """Base exception for all buildlimits errors."""


class SpecError(BuildLimitsError):
    """Raised when a limit spec cannot be parsed into a profile."""


class PackError(BuildLimitsError):
    """Raised when spec files cannot be packed or unpacked."""


class LicenseError(BuildLimitsError):
    """Raised when a license header cannot be found."""


class GeneratorError(BuildLimitsError):
    """Raised when the generated module cannot be rendered."""


class ConfigError(BuildLimitsError):
    """Raised when configuration is invalid."""
