"""Operations applied to configuration dictionaries."""

from copy import deepcopy
from typing import Any, Dict, List


def deep_merge(
    base_dict: Dict[str, Any], override_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Recursively merge override_dict into base_dict.

    Parameters
    ----------
    base_dict : Dict[str, Any]
        Base dictionary
    override_dict : Dict[str, Any]
        Override dictionary

    Returns
    -------
    Dict[str, Any]
        Merged dictionary (new copy)
    """
    result = deepcopy(base_dict)

    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def extract_includes(config: Dict[str, Any]) -> List[str]:
    """Pops the include directive out of a configuration dictionary.

    Parameters
    ----------
    config : Dict[str, Any]
        Configuration dictionary, modified in place

    Returns
    -------
    List[str]
        List of files to include, in order
    """
    includes = config.pop("include", [])
    if isinstance(includes, str):
        includes = [includes]

    return list(includes)
