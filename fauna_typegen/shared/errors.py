"""Custom exceptions for fauna_typegen."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when a schema document has an unexpected shape."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class FaunaQueryError(SchemaError):
    """Raised when Fauna rejects or fails a schema query."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
    ) -> None:
        self.status = status
        self.code = code
        details = ", ".join(
            part
            for part in (
                f"status {status}" if status is not None else "",
                f"code '{code}'" if code else "",
            )
            if part
        )
        super().__init__(f"Fauna query failed ({details}): {message}" if details else f"Fauna query failed: {message}")


class MissingSecretError(SchemaError):
    """Raised when no Fauna admin secret is configured."""

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"No Fauna admin key provided. Use --secret=... or set {env_var} env var."
        )
