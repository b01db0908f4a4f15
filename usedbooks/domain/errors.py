# usedbooks/domain/errors.py
"""
Wyjatki domenowe. Routery mapuja je na kody HTTP:

    ValueError             -> 400
    PermissionError        -> 403
    NotFoundError          -> 404
    UnsupportedActionError -> 405
    AlreadyExistsError     -> 409
    ProductUnavailableError-> 409
"""


class NotFoundError(LookupError):
    pass


class AlreadyExistsError(ValueError):
    pass


class ProductUnavailableError(ValueError):
    pass


class EmptyCartError(ValueError):
    pass


class UnsupportedActionError(ValueError):
    pass
