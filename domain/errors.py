"""
Error taxonomy for the NEC pipeline.

Configuration errors are raised while the analysis is being set up, before
any event is read. Dataset and output errors abort a run.
"""


class NECError(Exception):
    pass


class ConfigurationError(NECError):
    pass


class DuplicateNameError(ConfigurationError):
    pass


class UnknownAxisError(ConfigurationError, KeyError):
    pass


class UnknownHistogramError(ConfigurationError, KeyError):
    pass


class MissingInputError(ConfigurationError):
    """A derivation step reads a quantity that no earlier step (or raw collection) provides."""
    pass


class RegistrySealedError(ConfigurationError):
    pass


class DatasetError(NECError):
    """The event source could not be opened or holds no events."""
    pass


class OutputError(NECError):
    pass
