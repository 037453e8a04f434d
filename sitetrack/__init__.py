"""SiteTrack: construction project and action tracking API."""

__version__ = "0.1.0"
