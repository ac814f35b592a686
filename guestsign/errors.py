# guestsign/errors.py
# erreurs metier, traduites en reponses json par create_app


class GuestSignError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GuestSignError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(GuestSignError):
    status_code = 404
    default_message = "Not found"


class PageNotFoundError(NotFoundError):
    def __init__(self, page: int, page_count: int):
        self.page = page
        self.page_count = page_count
        super().__init__(f"Page {page} does not exist (document has {page_count} page(s))")


class InvalidTransitionError(GuestSignError):
    status_code = 409

    def __init__(self, status: str, event: str):
        self.status = status
        self.event = event
        super().__init__(f"Cannot {event} a session in status '{status}'")


class InvalidImageError(GuestSignError):
    status_code = 400
    default_message = "Signature image could not be decoded"


class InvalidDocumentError(GuestSignError):
    status_code = 400
    default_message = "Document is not a readable PDF"


class InvalidViewportError(GuestSignError):
    status_code = 400
    default_message = "Viewport is not rendered or has invalid dimensions"


class PersistenceError(GuestSignError):
    status_code = 500
    default_message = "Could not save data"


class EmailDeliveryError(GuestSignError):
    status_code = 502
    default_message = "Failed to send email"
