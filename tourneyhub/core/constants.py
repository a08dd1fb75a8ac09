"""Global constants for the tourneyhub application."""

# Store paths
TOURNAMENTS_PATH = "tournaments"

# Tournament formats
FORMAT_KNOCKOUT = "knockout"
FORMAT_ROUND_ROBIN = "round_robin"
FORMAT_LEAGUE_KNOCKOUT = "league_knockout"
TOURNAMENT_FORMATS = (FORMAT_KNOCKOUT, FORMAT_ROUND_ROBIN, FORMAT_LEAGUE_KNOCKOUT)
DEFAULT_FORMAT = FORMAT_KNOCKOUT
DEFAULT_GAME_TYPE = "esports"

# Numeric field bounds: (minimum, maximum, default)
MATCH_DURATION_BOUNDS = (10, 240, 30)
BREAK_MINUTES_BOUNDS = (0, 120, 10)
MAX_PARTICIPANTS_BOUNDS = (2, 64, 8)

# Name rules
MIN_TOURNAMENT_NAME_LENGTH = 3
MIN_TEAM_NAME_LENGTH = 2
MAX_DISPLAY_NAME_LENGTH = 24
DEFAULT_DISPLAY_NAME = "Player"

# Fixture generation
MIN_TEAMS_FOR_FIXTURES = 2
BYE_TEAM = "BYE"
FINAL_PLACEHOLDER_A = "TBD #1"
FINAL_PLACEHOLDER_B = "TBD #2"
KNOCKOUT_LABEL = "Knockout Match {number}"
LEAGUE_LABEL = "League Match {number}"
FINAL_LABEL = "Final (Top 2 after league)"

MS_PER_MINUTE = 60 * 1000

# Join block reasons
REASON_NOT_FOUND = "Tournament no longer exists."
REASON_CLOSED = "Join window is closed for this tournament."
REASON_ALREADY_JOINED = "You already joined this tournament."
REASON_FULL = "Tournament is full."
REASON_LOGIN_REQUIRED = "You must be logged in."
REASON_UNKNOWN = "Unable to join this tournament."

# Join state labels for listings
STATE_JOINED = "Joined"
STATE_CLOSED = "Closed"
STATE_FULL = "Full"
STATE_OPEN = "Open"

# Game type -> recommended format
RECOMMENDED_FORMATS = {
    "cricket_t20": FORMAT_LEAGUE_KNOCKOUT,
    "fifa": FORMAT_KNOCKOUT,
    "baseball": FORMAT_ROUND_ROBIN,
}

# Compare-and-update defaults
STORE_MAX_RETRIES = 25
STORE_RETRY_BACKOFF = 0.05
REPAIR_MAX_WORKERS = 4

# Seconds a request waits for the first tournament snapshot
SESSION_READY_TIMEOUT = 10
