#!/usr/bin/env python3
"""Convenience runner for the location tracks tool.

Usage:
    python run.py csv positions.csv START END out.gpx
"""
from location_tracks.main import main

if __name__ == "__main__":
    raise SystemExit(main())
