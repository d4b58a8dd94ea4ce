class AppError:
    """Represents different categories of application errors."""

    def __init__(self, category: str, message: str) -> None:
        # 'validation', 'payload_too_large', 'not_found', 'conflict',
        # 'storage_error', 'reference_update_failed', 'infrastructure'
        self.category = category
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"AppError(category={self.category!r}, message={self.message!r})"
