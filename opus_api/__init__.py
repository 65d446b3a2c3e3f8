"""Internal API for styles, per-track class assignments, class weights and
playback profiles."""

__version__ = "0.1.0"
