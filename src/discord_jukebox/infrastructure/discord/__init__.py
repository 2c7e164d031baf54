"""discord.py front-end: bot, cogs and adapters."""
