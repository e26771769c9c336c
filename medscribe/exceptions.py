from fastapi import Request
from fastapi.responses import JSONResponse


class MedScribeError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ImageValidationError(MedScribeError):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=422)


class RecordValidationError(MedScribeError):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=422)


class OCRError(MedScribeError):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=502)


class LanguageModelError(MedScribeError):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message=message, status_code=status_code)


class QuotaExceededError(LanguageModelError):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=429)


class APIKeyError(LanguageModelError):
    pass


class TerminologyLookupError(MedScribeError):
    def __init__(self, message: str):
        super().__init__(message=message, status_code=502)


async def medscribe_error_handler(
    request: Request, exc: MedScribeError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )
