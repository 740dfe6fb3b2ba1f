"""Exception types raised inside the analysis core."""


class SponsorWatchError(Exception):
    """Base class for all sponsor-watch errors."""


class TaxonomyError(SponsorWatchError):
    """The keyword taxonomy table is inconsistent (duplicate ids, bad severity, ...)."""


class MalformedInputError(SponsorWatchError):
    """An athlete record or platform payload does not match the input contract."""
