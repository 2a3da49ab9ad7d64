"""Module which chains the CRT track reconstruction steps."""

import numpy as np

from crtreco.config import load_config_file, parse_reco_config
from crtreco.utils.logger import logger

from .average import CRTHitAverager
from .track import CRTTrackBuilder
from .tzero import CRTTzeroClusterer

__all__ = ["CRTTrackReco"]


class CRTTrackReco:
    """Reconstructs straight CRT tracks from the CRT hits of one readout.

    The hits are first grouped into Tzero clusters. Within each cluster,
    co-located hits of the same tagger are averaged and the averaged hits
    are paired into tracks. Each track keeps the identifiers of the original
    hits it was built from.
    """

    # Name of the reconstruction step (as specified in the configuration)
    name = "crt_track_reco"

    def __init__(
        self,
        time_limit=0.1,
        average_hit_distance=30.0,
        distance_limit=50.0,
        crt_key="crthits",
        **kwargs,
    ):
        """Initialize the CRT track reconstruction.

        Parameters
        ----------
        time_limit : float, default 0.1
            Coincidence window used to build Tzero clusters, in microseconds
        average_hit_distance : float, default 30.
            Neighborhood radius used to average hits
        distance_limit : float, default 50.
            Maximum distance between a supporting hit and a track crossing
        crt_key : str, default 'crthits'
            Data product key which provides the CRT hits
        **kwargs : dict, optional
            Detector constants passed to :class:`CRTTrackBuilder`
            (width_band, max_width, num_steps, step, tagger_roles)
        """
        self.crt_key = crt_key
        self.clusterer = CRTTzeroClusterer(time_limit)
        self.averager = CRTHitAverager(average_hit_distance)
        self.builder = CRTTrackBuilder(distance_limit, **kwargs)

    @classmethod
    def from_config(cls, cfg):
        """Builds the reconstruction from a configuration.

        Parameters
        ----------
        cfg : Union[str, dict]
            Path to a `.yaml` configuration file or configuration dictionary.
            The `crt_track_reco` block is used if present.

        Returns
        -------
        CRTTrackReco
            CRT track reconstruction object
        """
        if isinstance(cfg, str):
            cfg = load_config_file(cfg)

        return cls(**parse_reco_config(cfg, cls.name))

    @classmethod
    def from_limits(cls, average_hit_distance, distance_limit, **kwargs):
        """Builds the reconstruction from its spatial limits only.

        The Tzero coincidence window keeps its default value.

        Parameters
        ----------
        average_hit_distance : float
            Neighborhood radius used to average hits
        distance_limit : float
            Maximum distance between a supporting hit and a track crossing
        **kwargs : dict, optional
            Other parameters passed to the constructor

        Returns
        -------
        CRTTrackReco
            CRT track reconstruction object
        """
        return cls(
            average_hit_distance=average_hit_distance,
            distance_limit=distance_limit,
            **kwargs,
        )

    def reconstruct(self, hits, hit_ids=None):
        """Builds CRT tracks from a list of CRT hits.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits from one readout
        hit_ids : List[int], optional
            (N) Identifier of each CRT hit. If not specified, the position of
            each hit in the input list is used.

        Returns
        -------
        List[CRTTrack]
            (T) List of CRT tracks, with `hit_ids` filled
        """
        if hit_ids is None:
            hit_ids = list(range(len(hits)))
        assert len(hit_ids) == len(hits), (
            "Must provide one identifier per CRT hit. "
            f"Got {len(hit_ids)}, but expected {len(hits)}."
        )

        # Loop over Tzero clusters
        tracks = []
        tzeros = self.clusterer.get_index(hits)
        for tzero in tzeros:
            # Average the hits of the Tzero cluster, one tagger at a time
            ave_hits = []
            for group in self.group_taggers(hits, tzero):
                group_hits = [hits[i] for i in group]
                group_ids = [hit_ids[i] for i in group]
                ave_hits.extend(self.averager.average_hits(group_hits, group_ids))

            # Build tracks from the averaged hits
            for track, ids in self.builder.create_tracks(ave_hits):
                track.id = len(tracks)
                track.hit_ids = np.asarray(ids, dtype=np.int64)
                tracks.append(track)

        logger.debug(
            "Reconstructed %d CRT track(s) from %d hit(s) in %d Tzero(s).",
            len(tracks),
            len(hits),
            len(tzeros),
        )

        return tracks

    @staticmethod
    def group_taggers(hits, index):
        """Splits a set of CRT hit indexes by tagger.

        Only hits from the same tagger may be averaged together.

        Parameters
        ----------
        hits : List[CRTHit]
            (N) List of CRT hits
        index : List[int]
            (M) Indexes of the CRT hits to split

        Returns
        -------
        List[List[int]]
            (G) Hit indexes of each tagger, in order of first appearance
        """
        groups = {}
        for i in index:
            groups.setdefault(hits[i].tagger, []).append(i)

        return list(groups.values())

    def process(self, data):
        """Reconstruct the CRT tracks of one entry.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            Update to the data product dictionary, with the `crt_tracks` key
        """
        # Fetch the CRT hits, nothing to do here if there are none
        crthits = data[self.crt_key]
        if not len(crthits):
            return {"crt_tracks": []}

        # Identify the hits by their ID when it is filled
        hit_ids = None
        if all(hit.id > -1 for hit in crthits):
            hit_ids = [hit.id for hit in crthits]

        return {"crt_tracks": self.reconstruct(crthits, hit_ids)}
