"""Error types raised across gateway and workflow boundaries."""


class AuthError(Exception):
    """Credential or validation failure reported by the auth provider.

    The message is the provider's own text and is shown to the user as is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreError(Exception):
    """Any failure from an insert or query against the record store."""


class WorkflowError(Exception):
    """Failure of one step of the two-step combo write."""


class SessionFailed(WorkflowError):
    """The session insert failed; nothing was written."""


class MunchieFailed(WorkflowError):
    """The munchie insert failed after the session row was committed."""

    def __init__(self, message: str, orphan_session_id: int) -> None:
        super().__init__(message)
        self.orphan_session_id = orphan_session_id
