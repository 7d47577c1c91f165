"""Errors raised by the restaurant store."""


class RestaurantStoreError(RuntimeError):
    """Base class for failures talking to the restaurant store."""


class LoadFailure(RestaurantStoreError):
    """The bulk read of restaurants failed."""


class WriteFailure(RestaurantStoreError):
    """An upsert or delete was rejected by the store."""


class SubscriptionFailure(RestaurantStoreError):
    """The realtime change stream could not be opened or was closed."""
