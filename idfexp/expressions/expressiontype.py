from enum import Enum


class ExpressionType(Enum):
    """
    The kind of value an expression evaluated to.
    """

    UNDEFINED = 0
    """
    No value, a referenced IDF file or variable was missing.
    """
    CONSTANT = 1
    """
    A number, or a variable bound to a constant.
    """
    FILE = 2
    """
    An IDF file.
    """
    VARIABLE = 3
    """
    A variable bound to a grid.
    """
    FUNCTION = 4
    """
    The result of a function, e.g. ``max(a,b)``.
    """
    IFTHENELSE = 5
    """
    The result of the ``if`` function.
    """
    ARITHMETIC = 6
    """
    The result of a single operation, e.g. ``a+b``.
    """
    COMPLEX = 7
    """
    The result of more than one operation.
    """

    @property
    def is_computed(self) -> bool:
        """Whether the value is new, and has to be written to the output path."""
        return self not in (
            ExpressionType.UNDEFINED,
            ExpressionType.CONSTANT,
            ExpressionType.FILE,
        )
