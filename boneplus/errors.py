# boneplus/errors.py


class ServiceError(Exception):
    """
    Base for errors a service raises towards an HTTP caller.
    Views turn them into {"error": message, **payload} with `status`.
    """
    status = 400
    message = "Request failed"

    def __init__(self, message: str | None = None, **payload):
        self.message = message or self.message
        self.payload = payload
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"error": self.message, **self.payload}
