"""
Error taxonomy of the querier.

- MalformedRequest: the request bytes (or an embedded payload) could not be decoded.
  Reported in the outer envelope.
- NoFixtureError: a valid query names something that was never seeded.
  Reported in the inner envelope.
- Unimplemented / Fatal: raised out of the querier, never turned into a response.
"""


class QuerierError(Exception):
    pass


class MalformedRequest(QuerierError):
    def __init__(self, error: str, request: bytes = b""):
        super().__init__(error)
        self.error = error
        self.request = bytes(request)


class NoFixtureError(QuerierError):
    pass


class Unimplemented(QuerierError, NotImplementedError):
    pass


class Fatal(QuerierError):
    pass
