"""Centralized message constants for error messages, log lines, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Discord ID Validation Errors
    INVALID_SNOWFLAKE = "Discord snowflake ID must be positive"
    SNOWFLAKE_TOO_LARGE = "Discord snowflake ID exceeds maximum value (2^64)"

    # Entry Validation Errors
    EMPTY_ENTRY_TITLE = "Entry title cannot be empty"

    # Command Validation Errors
    INVALID_SKIP_COUNT = "Skip count must be at least 1"
    EMPTY_QUERY = "Query cannot be empty"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Bootstrap Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates.

    Use these with logger.info(), logger.error(), etc. and pass values as
    parameters so formatting stays lazy.
    """

    # Commands and Replies
    COMMAND_RECEIVED = "Command received: /%s%s from %s in guild %s"
    REPLY_SENT = "Replying to %s in guild %s: %s"
    REPLY_EDITED = "Editing reply for %s in guild %s: %s"
    REPLY_FOLLOW_UP = "Follow-up for %s in guild %s: %s"
    REPLY_SEND_FAILED = "Failed to deliver reply in guild %s: %r"

    # Resolver Process
    RESOLVER_STARTED = "Resolving %r (pid=%s)"
    RESOLVER_SPAWN_FAILED = "Could not start resolver process for %r: %r"
    RESOLVER_LINE_SKIPPED = "Skipping resolver line: %.100s"
    RESOLVER_ENTRY_REJECTED = "Rejected entry (title=%s, stream_ok=%s, accepted=%s)"
    RESOLVER_ENTRY_ACCEPTED = "Accepted entry %d for %r: %s"
    RESOLVER_STDERR = "yt-dlp resolver stderr: %s"
    RESOLVER_STDERR_OVERLONG = "Dropped an over-long yt-dlp resolver stderr line"
    RESOLVER_FINISHED = "Resolver for %r exited with code %s after %d entries"
    RESOLVER_NO_ENTRIES = "Resolver produced no entries for %r"
    RESOLVER_CLOSED_EARLY = "Resolver for %r closed by consumer, terminating pid %s"
    RESOLVER_READ_FAILED = "Error reading resolver output for %r"

    # Stream Process
    STREAM_SPAWNED = "Spawned stream process pid=%s for guild %s: %s"
    STREAM_SPAWN_FAILED = "Failed to spawn stream process for guild %s: %r"
    STREAM_KILLED = "Killed stream process pid=%s for guild %s"
    STREAM_KILL_FAILED = "Error killing stream process pid=%s: %r"
    STREAM_EXITED = "Stream process pid=%s for guild %s exited with code %s"
    STREAM_STDERR = "yt-dlp stream stderr (guild %s): %s"
    STREAMS_SHUTDOWN = "Killed %d live stream processes"

    # Voice Connection
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Voice connection for guild %s not ready within %.1fs"
    VOICE_CLIENT_ERROR = "Client error connecting in guild %s: %r"
    VOICE_STALE_CLEANUP = "Found stale voice client in guild %s, cleaning up"
    VOICE_CHANNEL_NOT_FOUND = "Channel %s is not a voice channel in guild %s"
    VOICE_CLEANUP_ERROR = "Error during voice cleanup in guild %s: %r"

    # Player
    PLAYBACK_STARTED = "Playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Player refused source in guild %s: %r"
    PLAYBACK_CALLBACK_ERROR = "Error in player callback for guild %s"
    PLAYBACK_STALE_EVENT = "Ignoring player event from replaced source in guild %s"

    # Orchestrator
    PLAY_REQUESTED = "Play requested in guild %s: %r (playlist=%s)"
    PLAY_CANCELLED = "Play request in guild %s superseded by stop, dropping remaining entries"
    PLAY_NO_ENTRIES = "No entries for %r in guild %s"
    PLAY_CONNECT_FAILED = "Aborting play request in guild %s: %s"
    SESSION_CREATED = "Created session for guild %s in channel %s"
    SESSION_DESTROYED = "Destroyed session for guild %s (%s)"
    ENTRY_QUEUED = "Queued '%s' at position %d in guild %s"
    ENTRY_REPLACED = "Replacing '%s' with a newly requested entry in guild %s"
    ENTRY_ADVANCE = "Advancing to '%s' in guild %s"
    ENTRY_START_RETRY = "Stream start failed for '%s' in guild %s (retry %d/%d)"
    ENTRY_START_GAVE_UP = "Giving up on '%s' in guild %s after %d retries"
    ENTRIES_SKIPPED = "Skipped %d entries in guild %s: %s"
    QUEUE_DRAINED = "Queue empty in guild %s, disconnecting in %.0fs unless new entries arrive"
    IDLE_TEARDOWN = "Idle timeout reached in guild %s"
    IDLE_TEARDOWN_SKIPPED = "Idle timeout in guild %s ignored, session is active again"
    ANNOUNCE_SUPERSEDED = "Not announcing in guild %s, the request was stopped"
    PLAYER_EVENT_NO_SESSION = "Player event for guild %s without a session"

    # Presence
    PRESENCE_FAILED = "Failed to update presence: %r"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Jukebox in %s mode"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %.0fs"
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_READY = "Bot ready as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_SYNCED_GUILD = "Synced %s commands to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync to guild %s: %s"
    BOT_SYNCED_GLOBAL = "Synced %s commands globally"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync commands globally: %s"
    BOT_SLASH_COMMAND_ERROR = "Slash command error in '%s': %s"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_UNHANDLED_EVENT_ERROR = "Unhandled error in event %s"
    BOT_UNHANDLED_LOOP_ERROR = "Unhandled error in event loop: %s"
    YTDLP_COMMAND = "Using yt-dlp command: %s"
    YTDLP_NOT_FOUND = "yt-dlp executable %r not found; playback will fail"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in Discord interactions.
    Keep them short and plain; never include raw diagnostic detail.
    """

    # Play
    NOW_PLAYING = "🎵 Now playing: **{title}**"
    PLAYLIST_ADDED = "📃 Added playlist **{playlist_title}** to the queue"
    PLAY_CANCELLED = "⏹️ Playback was stopped before this request finished."
    ERROR_NO_AUDIO_INFO = "❌ Couldn't get audio information."

    # Stop
    STOPPED_AND_DISCONNECTED = "⏹️ Stopped playing and disconnected."

    # Skip
    SKIPPED_ONE = "⏭️ Skipped **{title}**"
    SKIPPED_MANY = "⏭️ Skipped {count} song(s): {titles}"

    # Queue
    QUEUE_NOW_PLAYING = "**Now playing:** {title}"
    QUEUE_NOT_PLAYING = "I'm not playing anything right now."
    QUEUE_UP_NEXT = "**Up next:**"
    QUEUE_LINE = "{position}. {title}"
    QUEUE_MORE = "... and {count} more song(s)"
    QUEUE_EMPTY = "**Queue is empty**"

    # State
    STATE_NOTHING_PLAYING = "I'm not playing anything."
    STATE_NEED_TO_BE_IN_VOICE = "You need to be in a voice channel!"

    # Errors
    ERROR_OCCURRED = "❌ Something went wrong while handling that command."
