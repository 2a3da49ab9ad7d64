"""Translates configuration blocks into reconstruction parameters."""

from typing import Any, Dict

from .errors import ConfigValidationError

__all__ = ["parse_reco_config"]

# CamelCase option names and their snake_case equivalents
RECO_ALIASES = {
    "TimeLimit": "time_limit",
    "AverageHitDistance": "average_hit_distance",
    "DistanceLimit": "distance_limit",
}

# Parameters accepted by the CRT track reconstruction
RECO_KEYS = (
    "time_limit",
    "average_hit_distance",
    "distance_limit",
    "crt_key",
    "width_band",
    "max_width",
    "num_steps",
    "step",
    "tagger_roles",
)


def parse_reco_config(cfg: Dict[str, Any], key: str = "crt_track_reco") -> Dict[str, Any]:
    """Parses the CRT track reconstruction block of a configuration.

    Parameters
    ----------
    cfg : Dict[str, Any]
        Configuration dictionary. If it contains `key`, that block is used,
        otherwise the dictionary itself is taken as the block.
    key : str, default 'crt_track_reco'
        Name of the reconstruction block

    Returns
    -------
    Dict[str, Any]
        Keyword arguments of :class:`crtreco.reco.CRTTrackReco`

    Raises
    ------
    ConfigValidationError
        If a key is not recognized or specified twice
    """
    block = cfg.get(key, cfg) if cfg is not None else {}
    if block is None:
        return {}

    params = {}
    for name, value in block.items():
        param = RECO_ALIASES.get(name, name)
        if param not in RECO_KEYS:
            raise ConfigValidationError(
                f"CRT track reconstruction parameter not recognized: {name}. "
                f"Must be one of {list(RECO_ALIASES) + list(RECO_KEYS)}."
            )
        if param in params:
            raise ConfigValidationError(
                f"CRT track reconstruction parameter specified twice: {param}."
            )
        params[param] = value

    return params
