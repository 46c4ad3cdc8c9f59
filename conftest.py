"""Global pytest configuration."""

import os

# Point the trip store at a non-routable test host before any imports
os.environ.setdefault("TRIP_STORE_URL", "http://trip-store.test")
os.environ.setdefault("ENABLE_OUTBOUND_HEALTHCHECK", "false")
