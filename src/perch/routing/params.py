"""Path parameter converters.

Built-in converters for route path segments like ``{id:int}``. Matched
values are always handed back as strings; the converter only decides
which segments a parameter accepts.
"""

import re

# converter name -> regex pattern for a single captured value
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def converter_regex(param_type: str) -> re.Pattern[str]:
    """Compile the anchored regex for *param_type*.

    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    return re.compile(f"^{CONVERTERS[param_type]}$")
