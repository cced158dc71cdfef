from idfexp.array_io import reading
