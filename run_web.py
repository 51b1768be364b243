#!/usr/bin/env python3
"""
Main entry point for the SquadShuffle web application.

This script launches the Flask-based JSON API server. Set
SQUADSHUFFLE_DATA_DIR to store the roster somewhere other than ./data.
"""
import logging
import os

from squadshuffle.ui.web_app import run_web_app
from squadshuffle.utils.constants import DEFAULT_DATA_DIR

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("SQUADSHUFFLE_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(data_dir=os.environ.get("SQUADSHUFFLE_DATA_DIR", DEFAULT_DATA_DIR))
