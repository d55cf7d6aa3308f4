"""
Error Types
===========

Everything that can go wrong in the ingest service has a class here.

HOW THEY ARE SURFACED:
---------------------
The FastAPI app registers one exception handler for IngestError (see main.py)
that turns any of these into a JSON body:

    {"status": "error", "message": "<message>"}

using the status_code attribute of the error class.

    ConfigurationError   -> 500 "server misconfigured"
    ServiceNotReadyError -> 500 "server not fully started yet"
    AuthenticationError  -> 401 "unauthorized"
    StorageWriteError    -> 500 <raw database error text>
    StorageReadError     -> never reaches the client (GET returns [])
    StartupError         -> never reaches the client (server refuses to start)
"""


class IngestError(Exception):
    """Base class for all errors raised by the ingest service."""

    status_code = 500
    message = "internal error"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConfigurationError(IngestError):
    """The server has no shared secret configured."""

    status_code = 500
    message = "server misconfigured"


class AuthenticationError(IngestError):
    """The caller's x-api-key does not match the shared secret."""

    status_code = 401
    message = "unauthorized"


class StorageWriteError(IngestError):
    """Inserting a reading failed. The message is the backend's own error text."""

    status_code = 500


class StorageReadError(IngestError):
    """Fetching recent readings failed."""

    status_code = 500


class StartupError(IngestError):
    """Storage could not be reached or the schema could not be created."""

    status_code = 500


class ServiceNotReadyError(IngestError):
    """A request arrived before the app finished starting up."""

    status_code = 500
    message = "server not fully started yet"
