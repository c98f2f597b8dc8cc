"""
stormdmg package
================

Health and economic impact of severe weather events, from the NOAA storm data.

- The CLI entry point is in `stormdmg/cli.py`.
- The analysis pipeline (project, normalize, aggregate) is in `stormdmg/pipeline.py`.
- Dataset download and parsing is in `stormdmg/loader.py`.
"""

__version__ = '0.1.0'
