"""WCF Devotional Plan - spread the Westminster Confession over a date range."""

__version__ = "1.0.0"
