"""Storage errors raised by the data-access layer."""


class StorageError(Exception):
    """Base class for data-access failures."""


class NotInitializedError(StorageError):
    def __init__(self, backend: str = "relational"):
        super().__init__(f"Database not initialized ({backend} backend)")
        self.backend = backend


class InitializationError(StorageError):
    """The relational backend could not be prepared for use."""


class ClientNotFoundError(StorageError):
    def __init__(self, client_id: int):
        super().__init__(f"Client {client_id} not found")
        self.client_id = client_id
