"""GremlinOS community bot: platform bans, login alerts, upload announcements and giveaways."""

__version__ = "1.0.0"
