"""ViewModel orchestrating scans, location matching and both clustering passes."""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from core.config import PipelineConfig
from core.models import ClusterKind, ClusterResult, LocationFix, Photo
from core.services.cluster_builder import ClusterBuilder
from core.services.dbscan import dbscan
from core.services.distance import geo_distance, time_distance
from core.services.interfaces import DirectoryWalker, LocationLogParser, MetadataReader, PlaceLookup
from core.services.location_matcher import LocationMatcher
from core.services.outlier_filter import filter_outliers


class LibraryVM:
    """Main application view-model.

    Owns the photo collection and the location log for a session. Imports are
    all-or-nothing: a failed import leaves the previous photos and log intact.
    """

    def __init__(
        self,
        reader: MetadataReader,
        walker: DirectoryWalker,
        parser: LocationLogParser,
        place_lookup: PlaceLookup | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        """Create a LibraryVM.

        Args:
            reader: Extracts capture metadata from image files.
            walker: Enumerates files under a scan root.
            parser: Parses location history files.
            place_lookup: Resolves cluster labels; None keeps coordinate labels.
            config: Matching and clustering parameters (defaults when None).
        """
        self._reader = reader
        self._walker = walker
        self._parser = parser
        self._config = config or PipelineConfig()
        self._matcher = LocationMatcher(max_time_gap=self._config.max_time_gap)
        self._builder = ClusterBuilder(place_lookup)
        self.photos: list[Photo] = []
        self.locations: list[LocationFix] = []
        self.spatial_result: ClusterResult | None = None
        self.temporal_result: ClusterResult | None = None

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def import_location_history(self, path: str) -> int:
        """Load and filter a location log, replace the current one, then match.

        Returns:
            Number of photos that received a coordinate.
        """
        raw = self._parser.parse(path)
        fixes = filter_outliers(
            raw,
            max_accuracy_m=self._config.max_accuracy_m,
            max_speed_mps=self._config.max_speed_mps,
        )
        self.locations = fixes
        self.spatial_result = None
        self.temporal_result = None
        logger.info("Location log replaced: {} fixes ({} raw)", len(fixes), len(raw))
        return self.update_locations()

    def scan_folder(
        self, root: str, progress: Callable[[int], None] | None = None
    ) -> int:
        """Scan `root` for images, replace the photo collection, then match.

        Files the metadata reader does not recognise are skipped silently.

        Returns:
            Number of photos found.
        """
        logger.info("Scanning photos under {}", root)
        found: list[Photo] = []
        for path in self._walker.walk(root):
            meta = self._reader.read(path)
            if meta is None:
                continue
            found.append(
                Photo(
                    file_path=path,
                    capture_date=meta.capture_date,
                    latitude=meta.latitude,
                    longitude=meta.longitude,
                )
            )
            if progress is not None:
                progress(len(found))

        self.photos = found
        self.spatial_result = None
        self.temporal_result = None
        dated = sum(1 for p in found if p.capture_date is not None)
        tagged = sum(1 for p in found if p.has_location)
        logger.info(
            "Scan complete: {} photos, {} with capture date, {} with embedded GPS",
            len(found),
            dated,
            tagged,
        )
        self.update_locations()
        return len(found)

    def update_locations(self) -> int:
        """Attach the closest fix to every dated photo that lacks a coordinate."""
        matches = self._matcher.match_photos(self.photos, self.locations)
        for m in matches:
            m.photo.set_location(m.fix)
        if matches:
            logger.info("Assigned locations to {} photos", len(matches))
        return len(matches)

    def cluster_location(
        self, should_cancel: Callable[[], bool] | None = None
    ) -> ClusterResult:
        """Spatial pass over photos that have a coordinate."""
        items = [p for p in self.photos if p.has_location]
        params = self._config.spatial
        partition = dbscan(
            items, geo_distance, params.epsilon, params.min_neighbors, should_cancel
        )
        self.spatial_result = self._builder.build(ClusterKind.SPATIAL, items, partition)
        return self.spatial_result

    def cluster_time(self, should_cancel: Callable[[], bool] | None = None) -> ClusterResult:
        """Temporal pass over photos that have a capture date."""
        items = [p for p in self.photos if p.capture_date is not None]
        params = self._config.temporal
        partition = dbscan(
            items, time_distance, params.epsilon, params.min_neighbors, should_cancel
        )
        self.temporal_result = self._builder.build(ClusterKind.TEMPORAL, items, partition)
        return self.temporal_result

    def run_all(
        self, should_cancel: Callable[[], bool] | None = None
    ) -> tuple[ClusterResult, ClusterResult]:
        """Match, then run the spatial and temporal passes."""
        self.update_locations()
        spatial = self.cluster_location(should_cancel)
        temporal = self.cluster_time(should_cancel)
        return spatial, temporal

    @property
    def photo_count(self) -> int:
        """Number of photos currently loaded."""
        return len(self.photos)
