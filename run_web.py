#!/usr/bin/env python3
"""
Main entry point for the Squadboard web API.

This script launches the Flask-based JSON server using settings from the
environment (see ``squadboard.config.Settings``).
"""
from squadboard.config import Settings
from squadboard.services import ServiceFactory
from squadboard.ui import run_web_app
from squadboard.utils import configure_logging

if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    run_web_app(host=settings.host, port=settings.port, service_factory=ServiceFactory(settings))
