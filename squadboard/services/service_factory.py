"""
Service Factory for dependency injection.

Builds the data store and the services that share it, so the web layer and
scripts get identically wired instances.
"""
from typing import Optional

from ..config import Settings
from .analytics_service import AnalyticsService
from .availability_service import AvailabilityService
from .persistence_service import SQLiteTeamStore, TeamDataSource
from .slot_recommender import SlotRecommender
from .stats_service import TeamStatsService


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The recommender and analytics service are stateless and shared by every
    service the factory builds.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize factory with deployment settings (environment by default)."""
        self.settings = settings or Settings.from_env()
        self._data_source: Optional[TeamDataSource] = None
        self._recommender: Optional[SlotRecommender] = None
        self._analytics_service: Optional[AnalyticsService] = None

    def create_data_source(self) -> TeamDataSource:
        """
        Create the SQLite store named by the settings and make sure its tables exist.

        Returns:
            Configured store
        """
        store = SQLiteTeamStore(self.settings.db_path)
        store.initialize()
        return store

    def create_availability_service(self) -> AvailabilityService:
        return AvailabilityService(
            data_source=self._get_data_source(),
            recommender=self._get_recommender(),
        )

    def create_stats_service(self) -> TeamStatsService:
        return TeamStatsService(
            data_source=self._get_data_source(),
            analytics_service=self._get_analytics_service(),
            recommender=self._get_recommender(),
        )

    def create_complete_service_suite(self) -> dict:
        """
        Create every service over one shared data store.

        Returns:
            Dictionary containing all configured services
        """
        return {
            'data_source': self._get_data_source(),
            'availability': self.create_availability_service(),
            'stats': self.create_stats_service(),
        }

    def configure_data_source(self, data_source: TeamDataSource) -> None:
        """Use an existing store (in-memory store in tests, custom adapters)."""
        self._data_source = data_source

    def _get_data_source(self) -> TeamDataSource:
        """Get singleton data source."""
        if self._data_source is None:
            self._data_source = self.create_data_source()
        return self._data_source

    def _get_recommender(self) -> SlotRecommender:
        """Get singleton recommender."""
        if self._recommender is None:
            self._recommender = SlotRecommender()
        return self._recommender

    def _get_analytics_service(self) -> AnalyticsService:
        """Get singleton analytics service."""
        if self._analytics_service is None:
            self._analytics_service = AnalyticsService()
        return self._analytics_service
