"""
Exceptions raised while interpreting scripts.

Every error that occurs while a script line is processed is caught once by the
interpreter and re-raised as a :class:`ScriptError`, which carries the line
number and the offending line. :class:`QuietAbort` is the exception: it signals
a deliberate stop and is passed through unchanged.
"""


class IdfExpError(Exception):
    """Base class for errors raised by idfexp."""

    pass


class ScriptSyntaxError(IdfExpError):
    """
    Malformed script content: a FOR-loop, precondition, assignment, loop index
    reference or grid expression that cannot be parsed.
    """

    pass


class MissingResourceError(IdfExpError):
    """A referenced IDF file or variable does not exist."""

    pass


class QuietAbort(Exception):
    """
    Raised in quiet mode ``SILENT_EXIT`` when a referenced IDF file or variable
    is missing. Not a subclass of :class:`IdfExpError`: the run stops, but not
    because of a failure.
    """

    pass


class ScriptError(IdfExpError):
    """
    An error at a specific line of a script.

    Parameters
    ----------
    line_number: int
        1-based number of the (first physical) line of the script.
    line: str
        The logical line that was processed.
    cause: str
        Description of what went wrong.
    """

    def __init__(self, line_number: int, line: str, cause: str):
        self.line_number = line_number
        self.line = line
        self.cause = cause
        super().__init__(f"Error in line {line_number}: {cause}: {line}")

    @classmethod
    def from_exception(
        cls, line_number: int, line: str, exception: Exception
    ) -> "ScriptError":
        if isinstance(exception, IdfExpError):
            cause = str(exception)
        else:
            cause = f"Unexpected error ({type(exception).__name__}): {exception}"
        return cls(line_number, line, cause)
