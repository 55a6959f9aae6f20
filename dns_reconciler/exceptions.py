#
#
#

from octodns.provider import ProviderException


class ProviderError(ProviderException):
    pass


class TransportError(ProviderError):
    """The request could not be sent or no response was received."""

    def __init__(self, operation, target, cause):
        super().__init__(f'{operation} {target} failed: {cause}')
        self.operation = operation
        self.target = target
        self.cause = cause


class ProviderRejected(ProviderError):
    """The provider answered with a non-success status."""

    def __init__(self, status, body=None, code=None):
        detail = body if body else code
        message = f'Rejected by provider (status={status})'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)
        self.status = status
        self.body = body
        self.code = code


class ProviderUnauthorized(ProviderRejected):
    def __init__(self, body=None, code=None):
        super().__init__(401, body, code)


class ProviderNotFound(ProviderRejected):
    def __init__(self, body=None, code=None):
        super().__init__(404, body, code)


class DecodeError(ProviderError):
    """A success response did not have the expected shape."""
