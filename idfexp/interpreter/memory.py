import gc

from idfexp.interpreter.variables import VariableTable
from idfexp.logging import logger
from idfexp.settings import InterpreterSettings


def release_memory(variables: VariableTable, settings: InterpreterSettings) -> int:
    """
    Write the values of all variables that have not been written yet, and drop
    all grid values from memory. Grids are read again from their IDF files when
    they are used later on.

    Returns
    -------
    released: int
        Number of grids of which the values were dropped.
    """
    released = 0
    for variable in variables.values():
        variable.persist(settings)
        if variable.release():
            released += 1
    gc.collect()
    if settings.debug:
        logger.info(f"Released memory of {released} grid(s)", indent_level=1)
    return released
