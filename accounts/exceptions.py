"""
Payment domain errors. Each carries a user-facing message and the HTTP status
the API layer answers with.
"""


class PaymentError(Exception):
    """Base class for payment and tuition errors"""
    status_code = 400

    def __init__(self, message, errors=None):
        self.message = message
        self.errors = errors or []
        super().__init__(self.message)


class TuitionValidationError(PaymentError):
    """Invalid input for a tuition or payment operation"""
    status_code = 400


class PaymentNotFound(PaymentError):
    """Referenced student or payment does not exist in the caller's tenant"""
    status_code = 404
