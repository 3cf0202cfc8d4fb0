from fastapi import HTTPException, status

from src.validation import FieldError


class APIError(HTTPException):
    def __init__(self, status_code: int, detail, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail)
        self.headers = headers


class LinkNotFoundError(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Link not found"
        )


class DuplicateKeyError(APIError):
    def __init__(self, domain: str, key: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Short link '{domain}/{key}' already exists"
        )


class KeyGenerationError(APIError):
    def __init__(self, domain: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Cannot generate a unique key for domain '{domain}'"
        )


class TagNotFoundError(APIError):
    def __init__(self, references: list[str]):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid tags detected: {', '.join(references)}"
        )


class TagExistsError(APIError):
    def __init__(self, name: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Tag '{name}' already exists"
        )


class InvalidExpirationError(APIError):
    def __init__(self, value: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid expiration date '{value}'"
        )


class InvalidPayloadError(APIError):
    def __init__(self, errors: list[FieldError]):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[error.model_dump(mode="json") for error in errors]
        )
        self.errors = errors


class MissingWorkspaceError(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required `workspaceId` query parameter"
        )


class WorkspaceNotFoundError(APIError):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workspace not found"
        )


class WorkspaceExistsError(APIError):
    def __init__(self, slug: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Workspace '{slug}' already exists"
        )
