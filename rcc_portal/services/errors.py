class NotFoundError(Exception):
    pass


class PermissionDeniedError(Exception):
    pass


class InvalidUploadError(Exception):
    pass


class FormValidationError(Exception):
    """Submission failed the event's registration form rules."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("Registration form is invalid.")
        self.errors = errors
