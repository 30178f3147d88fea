"""Errors raised by blockedit. Structural infeasibility is never an error; commands return False."""


class UnknownExtensionError(KeyError):
    pass


class UnknownNodeTypeError(KeyError):
    pass


class SelectionError(ValueError):
    pass
