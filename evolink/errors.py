"""
evolink — Exception taxonomy

Copyright (c) 2026 SolisHQ (github.com/solishq). MIT License.
"""


class EvolinkError(Exception):
    """Base for all evolink exceptions."""

    pass


class ConfigurationError(EvolinkError, ValueError):
    """Rejected at construction: bad population size, neuron count, link cap or rate."""

    pass


class ExtinctionError(EvolinkError, RuntimeError):
    """Repopulation was asked for with no survivors left to breed from."""

    pass


class InvariantError(EvolinkError, AssertionError):
    """A link or agent broke a structural bound. Programmer error, never recovered."""

    pass


class SnapshotError(EvolinkError, ValueError):
    """A population dump could not be validated or resolved against the catalogue."""

    pass
