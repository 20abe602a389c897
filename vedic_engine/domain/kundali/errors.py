class KundaliError(Exception):
    """
    Base exception for all kundali-related domain errors.
    """
    pass


class ConfigurationError(KundaliError):
    """
    Raised when calculation inputs are malformed or inconsistent.

    Examples: a house-cusp list that is not 12 entries long, a birth
    instant that lies after the "as-of" instant, a chart missing a planet.
    Never recovered from with a default value.
    """
    pass


class UnresolvedLookupError(KundaliError):
    """
    Raised when a nakshatra or sign name is not found in a classification table.

    Public resolvers catch this and fall back to documented defaults,
    reporting ``resolved=False`` in their output.
    """

    def __init__(self, table: str, value: str):
        self.table = table
        self.value = value
        super().__init__(f"'{value}' not found in {table} table")


class CalculationError(KundaliError):
    """
    Raised when an astronomical calculation fails.
    """
    pass


class StaleTableWarning(UserWarning):
    """
    Emitted when a date falls outside a hand-maintained calendar table.

    The caller receives a best-effort default answer; the table needs
    to be extended.
    """
    pass


class UnsupportedAyanamsaError(KundaliError):
    """
    Raised when an unsupported ayanamsa is requested.
    """
    pass
