"""Feature apps for GoodPlace."""
