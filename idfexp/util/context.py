import contextlib
import warnings


@contextlib.contextmanager
def ignore_warnings():
    """
    Contextmanager to ignore RuntimeWarnings as they are frequently
    raised by numpy when evaluating expressions on grids containing NoData
    (comparisons with NaN, all-NaN slices while upscaling).

    Examples
    --------
    >>> with idfexp.util.context.ignore_warnings():
            function_that_throws_warnings()

    """
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", RuntimeWarning)
        yield

