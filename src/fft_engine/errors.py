"""
Exceptions raised by the transform engine.
"""


class PreconditionViolation(ValueError):
    """
    A caller broke a construction-time or call-time contract.

    Raised for a transform length that the algorithm cannot handle, a signal
    whose length differs from the engine length, a badly shaped output buffer,
    or an unknown strategy name. These are programmer errors: the library
    never catches them.
    """
