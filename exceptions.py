class FormError(Exception):
    """Client-side problem with a submitted form (HTTP 400)."""

    status_code = 400
    public_message = "Invalid form submission"

    def __init__(self, message: str = None):
        super().__init__(message or self.public_message)


class MissingFieldError(FormError):
    public_message = "All fields are required"

    def __init__(self, field: str = None):
        self.field = field
        super().__init__(self.public_message)


class InvalidEmailError(FormError):
    public_message = "Invalid email format"


class MethodNotAllowed(Exception):
    status_code = 405
    public_message = "Method not allowed"

    def __init__(self, method: str = "", path: str = ""):
        self.method = method
        self.path = path
        super().__init__(f"{method} {path}".strip())


class StoreError(Exception):
    """Backing store failure. The detail is for logs only, never for clients."""

    status_code = 500

    def __init__(self, operation: str, detail=None):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class StoreUnavailable(StoreError):
    pass


class WriteFailed(StoreError):
    pass


class ReadFailed(StoreError):
    pass
