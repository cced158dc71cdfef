"""Metadata files (.MET) written next to result IDF files."""

import collections
import pathlib

import jinja2


class Metadata(collections.UserDict):
    """
    Description of how a result was produced, rendered as ``key=value`` lines.

    Examples
    --------
    >>> metadata = Metadata("Expression evaluation using IDF files: a+b")
    >>> metadata["Source"] = "run.ini"
    >>> metadata.write("results/c.IDF")  # writes results/c.MET
    """

    _template = jinja2.Template(
        "{%- for key, value in settings.items() %}\n"
        "{{key}}={{value}}\n"
        "{%- endfor %}\n"
    )

    def __init__(self, description: str, process_description: str = "", source=""):
        super().__init__()
        self["Description"] = description
        self["ProcessDescription"] = process_description
        self["Source"] = str(source)
        self["Producer"] = "idfexp"

    def render(self) -> str:
        return self._template.render(settings=self.data)

    @staticmethod
    def path(idf_path) -> pathlib.Path:
        return pathlib.Path(idf_path).with_suffix(".MET")

    def write(self, idf_path) -> pathlib.Path:
        """Write the metadata file that belongs to the IDF file at idf_path."""
        path = self.path(idf_path)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render().lstrip("\n"))
        return path
