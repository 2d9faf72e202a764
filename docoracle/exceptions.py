"""Exceptions raised by docoracle collaborators"""


class DocOracleError(Exception):
    """
    Base class for docoracle errors

    partial_matches holds the sentences of a member translated before the
    failure, so callers can keep them.
    """

    def __init__(self, message: str = "", partial_matches=()):
        super().__init__(message)
        self.partial_matches = list(partial_matches)


class ConfigurationError(DocOracleError):
    """Raised when a configuration file cannot be loaded"""
    pass


class ModelLoadError(DocOracleError):
    """Raised when a member-model file is missing or malformed"""
    pass


class CandidateEnumerationError(DocOracleError):
    """Raised when the members of a declaring type cannot be enumerated"""
    pass


class GuardTranslationError(DocOracleError):
    """Raised when the guard translator fails outright (not when it yields nothing)"""
    pass


class ValidatorUnavailableError(DocOracleError):
    """Raised when an oracle validator's toolchain is not installed"""
    pass
