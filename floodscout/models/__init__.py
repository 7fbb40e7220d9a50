from floodscout.models.report import Report

__all__ = ["Report"]
