"""Domain errors raised by the taxonomy engine.

Routes never catch these; the handlers registered in ``inkwell.main`` turn
them into JSON responses.
"""


class TaxonomyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TaxonomyError):
    """Bad input: empty name or slug, slug collision, broken association."""

    status_code = 400


class NotFoundError(TaxonomyError):
    status_code = 404


class Unauthorized(TaxonomyError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized. Admin access required."):
        super().__init__(message)


class CascadeDeleteError(TaxonomyError):
    """A cascade delete failed part way and was rolled back; the parent is still present."""

    status_code = 500
