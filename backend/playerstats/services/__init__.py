"""Account and statistics services.

HTTP routes, socket handlers and CLI commands call into these modules; they
raise ``playerstats.errors`` exceptions and never build responses themselves.
"""
