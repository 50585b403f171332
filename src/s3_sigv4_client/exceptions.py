class S3SigV4ClientError(Exception):
    pass


class SigningError(S3SigV4ClientError):
    pass


class MalformedUrlError(SigningError):
    pass


class MalformedTimestampError(SigningError):
    pass


class CryptoFailureError(SigningError):
    pass


class ConfigError(S3SigV4ClientError, ValueError):
    pass


class UnsupportedCapabilityError(S3SigV4ClientError):
    pass


class S3TransportError(S3SigV4ClientError):
    pass


class S3Error(S3SigV4ClientError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
        resource: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.resource = resource
        self.request_id = request_id

    def __str__(self) -> str:
        if self.status_code and self.error_code:
            return f"{self.error_code} ({self.status_code}): {self.message}"
        elif self.status_code:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message


class S3ClientError(S3Error):
    pass


class S3ServerError(S3Error):
    pass


class S3NotFoundError(S3ClientError):
    def __init__(
        self,
        message: str = "The specified resource was not found",
        error_code: str = "NoSuchKey",
        resource: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, 404, error_code, resource, request_id)


class S3AccessDeniedError(S3ClientError):
    def __init__(
        self,
        message: str = "Access denied",
        resource: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, 403, "AccessDenied", resource, request_id)


class S3SignatureMismatchError(S3ClientError):
    def __init__(
        self,
        message: str = "The request signature does not match",
        resource: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, 403, "SignatureDoesNotMatch", resource, request_id)


class S3InvalidRequestError(S3ClientError):
    def __init__(
        self,
        message: str = "Invalid request",
        resource: str | None = None,
        request_id: str | None = None,
    ):
        super().__init__(message, 400, "InvalidRequest", resource, request_id)
