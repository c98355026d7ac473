"""Errors raised by backend collaborators"""


class BackendError(Exception):
    """A call to the managed backend failed"""
    pass


class OrderNotFoundError(BackendError):
    """The referenced order does not exist"""
    pass
