# services/errors.py


class CatalogError(Exception):
    """Base class for catalog and KPI errors."""
    pass


class ValidationError(CatalogError):
    """A required field is missing or a value is invalid."""
    pass


class NotFoundError(CatalogError):
    """No row matches the requested id."""
    pass


class ConflictError(CatalogError):
    """The operation would break referential integrity."""
    pass


class InvalidRangeError(CatalogError):
    """startYear is after endYear."""
    pass


class AggregationFailure(CatalogError):
    """The store failed while computing KPIs."""
    pass


class ExtractionFailure(Exception):
    """The language model could not turn the text into publication metadata."""
    pass
