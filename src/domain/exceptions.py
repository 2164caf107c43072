"""
Domain exceptions - Semantic error types for the import wizard.

The step sequencer itself never fails; these are raised by the wizard
service when a request contradicts what the current facts allow.
"""


class DnsImportError(Exception):
    """Base class for DNS import domain errors."""

    pass


class OffchainPathUnavailable(DnsImportError):
    """Parent zone resolver is not the known offchain resolver for this network."""

    pass


class ImportPathNotChosen(DnsImportError):
    """Cannot move past the select-type step without an import path."""

    pass


class ImportAlreadyStarted(DnsImportError):
    """The item has already left the select-type step."""

    pass
