"""Routes package for SWAT readiness scoring API."""
