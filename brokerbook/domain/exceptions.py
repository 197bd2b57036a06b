"""Domain-specific exceptions: framework-independent."""


class RecordStoreError(Exception):
    """Base class for every error surfaced by the record store."""

    retryable = False


class ValidationError(RecordStoreError):
    """Raised when caller input is malformed (blank mandatory field, bad id, ...)."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        self.message = message
        super().__init__(message)


class InvalidRecordIdError(ValidationError):
    """Raised when a record id does not follow the ``{tenant}-{number}`` format."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(
            f"Invalid record id '{record_id}'. Expected: {{tenant}}-{{number}}",
            field="id",
        )


class InvalidStatusError(ValidationError):
    """Raised when a caller supplies a status value that is not allowed."""

    def __init__(self, value: object, allowed: list[str]):
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid status '{value}'. Use: {', '.join(allowed)}",
            field="status",
        )


class ForbiddenError(RecordStoreError):
    """Raised when a tenant addresses a record owned by another tenant."""

    def __init__(self, entity_type: str, entity_id: str, tenant: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.tenant = tenant
        super().__init__(f"Access denied to this {entity_type.lower()}")


class EntityNotFoundError(RecordStoreError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class StorageUnavailableError(RecordStoreError):
    """Raised when the persistence or blob collaborator fails or times out.

    The operation left nothing behind; callers may retry it as a whole.
    """

    retryable = True

    def __init__(self, action: str, reason: str = ""):
        self.action = action
        self.reason = reason
        message = f"Storage unavailable while trying to {action}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
