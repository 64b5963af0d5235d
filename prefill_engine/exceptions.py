class PrefillError(Exception):
    """Base class for errors raised by the prefill engine."""


class ParcelProviderError(PrefillError):
    """The parcel data provider could not be reached or rejected the request."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class PlacesProviderError(PrefillError):
    """The places provider returned an unusable response."""