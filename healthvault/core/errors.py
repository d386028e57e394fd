"""
Error taxonomy for the records API.

Every error carries the HTTP status it maps to and a short message that is
safe to hand back to the caller. Store failures keep their driver detail on
``__cause__`` only.
"""


class RecordError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(RecordError):
    status_code = 400
    message = "Invalid request"


class NotFoundError(RecordError):
    status_code = 404
    message = "Record not found"


class StoreError(RecordError):
    status_code = 500
    message = "Database error"
