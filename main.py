#!/usr/bin/env python3
"""Main entry point for the sleep tracker."""

from sleep_tracker.main import main


if __name__ == "__main__":
    main()
