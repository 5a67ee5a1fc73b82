"""
Web application module for Squadboard.

This module contains the Flask server exposing the team stats snapshot and
weekly availability as JSON API endpoints.
"""
import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from flask import Flask, jsonify, request

from ..exceptions import DataSourceError, InvalidInputError
from ..services.service_factory import ServiceFactory
from ..utils import CanonicalWeek, week_start

logger = logging.getLogger(__name__)

STATS_UNAVAILABLE = "Could not load stats"
AVAILABILITY_UNAVAILABLE = "Could not load availability"


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


class WebAppState:
    """
    State holder for the web application.

    Services come from the :class:`ServiceFactory`; the clock is injected so
    the reference time is decided here, at the request boundary.
    """

    def __init__(self, service_factory: Optional[ServiceFactory] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.service_factory = service_factory or ServiceFactory()
        services = self.service_factory.create_complete_service_suite()
        self.availability_service = services['availability']
        self.stats_service = services['stats']
        self.clock = clock

    def week_from_request(self) -> CanonicalWeek:
        """Canonical week of the ``week`` query argument, current week by default."""
        raw = request.args.get("week")
        if not raw:
            return week_start(self.clock())
        try:
            return week_start(date.fromisoformat(raw))
        except ValueError:
            raise InvalidInputError(f"Invalid week date: {raw!r}") from None


def create_app(service_factory: Optional[ServiceFactory] = None,
               clock: Callable[[], datetime] = utc_now) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        service_factory: Factory providing the services (built from the
            environment when omitted)
        clock: Source of the reference time for each request

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(service_factory, clock)
    app.config["APP_STATE"] = app_state

    # ==================== API Endpoints ==================== #

    @app.route("/api/teams/<team_id>/stats", methods=["GET"])
    def get_team_stats(team_id: str):
        """Full stats snapshot for the team as of now."""
        try:
            stats = asyncio.run(
                app_state.stats_service.get_team_stats(team_id, app_state.clock())
            )
        except DataSourceError:
            # Already logged by the stats service
            return jsonify({"success": False, "error": STATS_UNAVAILABLE}), 503

        return jsonify({"success": True, "stats": stats.to_dict()})

    @app.route("/api/teams/<team_id>/availability", methods=["GET"])
    def get_team_availability(team_id: str):
        """Slots and coverage report for a canonical week."""
        try:
            week = app_state.week_from_request()
            service = app_state.availability_service

            async def load():
                return await asyncio.gather(
                    service.fetch_week(team_id, week),
                    service.coverage_report(team_id, week),
                )

            slots, report = asyncio.run(load())
        except InvalidInputError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except DataSourceError:
            logger.error("Could not load availability for team %s", team_id, exc_info=True)
            return jsonify({"success": False, "error": AVAILABILITY_UNAVAILABLE}), 503

        return jsonify({
            "success": True,
            "week_start": week.isoformat(),
            "slots": [slot.to_dict() for slot in slots],
            "coverage": report.to_dict(),
        })

    @app.route("/api/teams/<team_id>/availability/<user_id>", methods=["PUT"])
    def replace_player_availability(team_id: str, user_id: str):
        """Replace everything a player saved for one week."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"success": False, "error": "A JSON object body is required"}), 400

        try:
            raw_week = data.get("week")
            if raw_week:
                try:
                    week = CanonicalWeek.parse(str(raw_week))
                except ValueError:
                    raise InvalidInputError(f"Invalid week date: {raw_week!r}") from None
            else:
                week = week_start(app_state.clock())

            raw_slots = data.get("slots", [])
            if not isinstance(raw_slots, list):
                raise InvalidInputError("slots must be a list")

            slots = asyncio.run(
                app_state.availability_service.replace_week(team_id, user_id, week, raw_slots)
            )
        except InvalidInputError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except DataSourceError:
            logger.error("Could not save availability for user %s", user_id, exc_info=True)
            return jsonify({"success": False, "error": "Could not save availability"}), 503

        return jsonify({
            "success": True,
            "week_start": week.isoformat(),
            "slots": [slot.to_dict() for slot in slots],
        })

    return app


def run_web_app(host: str = "127.0.0.1", port: int = 7122,
                service_factory: Optional[ServiceFactory] = None) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        service_factory: Optional pre-configured factory
    """
    app = create_app(service_factory)
    app.run(host=host, port=port, debug=False)
