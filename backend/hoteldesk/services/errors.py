"""
Service-level errors

Services raise ValueError for business-rule violations; ConflictError marks
the subset that clashes with existing state (duplicates, already-done
actions) so routers can answer 409 instead of 400.
"""


class ConflictError(ValueError):
    """The request conflicts with existing state"""
