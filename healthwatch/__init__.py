"""healthwatch: scheduled HTTP endpoint health checks with a small read API."""

__version__ = "1.0.0"
