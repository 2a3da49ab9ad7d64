"""Module which contains enumerated variables shared across the project."""

from enum import IntEnum

__all__ = ["TaggerRoleEnum", "DEFAULT_TAGGER_ROLES", "enum_factory", "role_map"]


class TaggerRoleEnum(IntEnum):
    """Enumerates the roles a CRT tagger can play in track reconstruction.

    Only three taggers are singled out by the track building logic:
    - `BOTTOM`: its hits are always used as the first anchor of a candidate
    - `TOP_HIGH`: its hits come first in an accepted track
    - `TOP_LOW`: paired with `TOP_HIGH`, flags two-hit stopping tracks
    Every other tagger is an `OTHER` panel.
    """

    OTHER = 0
    BOTTOM = 1
    TOP_HIGH = 2
    TOP_LOW = 3


# Default mapping from tagger volume name to role (ICARUS naming)
DEFAULT_TAGGER_ROLES = {
    "volTaggerBot_0": "bottom",
    "volTaggerTopHigh_0": "top_high",
    "volTaggerTopLow_0": "top_low",
}


def enum_factory(enum, value):
    """Parses an enumerated object from string name(s) to value(s).

    Parameters
    ----------
    enum : str
        Name of the enumerated type
    value : Union[str, List[str]]
        Name or names of the enumerated objects (from config)

    Returns
    -------
    Union[int, List[int]]
        Value or values of the enumerated objects
    """
    # Get the enumerated type
    ENUM_DICT = {"tagger_role": TaggerRoleEnum}
    if enum not in ENUM_DICT:
        raise ValueError(
            f"Enumerated type not recognized: {enum}. Must be one of "
            f"{list(ENUM_DICT.keys())}."
        )
    enum = ENUM_DICT[enum]

    # Translate enumerated strings into values
    if isinstance(value, str):
        if not hasattr(enum, value.upper()):
            raise ValueError(
                f"Enumerated object not recognized: {value}. Must be one "
                f"of {[e.name for e in enum]}."
            )

        return getattr(enum, value.upper()).value

    else:
        return [enum_factory("tagger_role", v) for v in value]


def role_map(tagger_roles=None):
    """Builds a mapping from tagger name to enumerated tagger role.

    Parameters
    ----------
    tagger_roles : Dict[str, Union[str, int]], optional
        Mapping from tagger name to role name (or role value). If not
        specified, the default ICARUS naming is used.

    Returns
    -------
    Dict[str, TaggerRoleEnum]
        Mapping from tagger name to role
    """
    if tagger_roles is None:
        tagger_roles = DEFAULT_TAGGER_ROLES

    roles = {}
    for tagger, role in tagger_roles.items():
        if isinstance(role, str):
            role = enum_factory("tagger_role", role)
        roles[tagger] = TaggerRoleEnum(role)

    # Each special role can only be held by a single tagger
    for role in (
        TaggerRoleEnum.BOTTOM,
        TaggerRoleEnum.TOP_HIGH,
        TaggerRoleEnum.TOP_LOW,
    ):
        holders = [t for t, r in roles.items() if r == role]
        if len(holders) > 1:
            raise ValueError(
                f"The {role.name} role can only be assigned to a single "
                f"tagger, got {holders}."
            )

    return roles
