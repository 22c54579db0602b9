"""Global constants for the nosjoueurs application."""

# Federation site
FFE_HOST = "echecs.asso.fr"
FFE_RESULTS_BASE_URL = "https://www.echecs.asso.fr/Resultats.aspx"
FFE_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
FFE_REQUEST_HEADERS = {
    "User-Agent": FFE_USER_AGENT,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "fr-FR,fr;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}
SCRAPE_TIMEOUT = 15
SCRAPE_MIN_HTML_LENGTH = 100

# Rate limiting
SCRAPE_RATE_LIMIT = 30
SCRAPE_RATE_WINDOW = 60
EVENTS_RATE_LIMIT = 10
EVENTS_RATE_WINDOW = 60
RATE_LIMIT_HEADER = "X-RateLimit-Remaining"

# Sync
SYNC_TOKEN_HEADER = "X-Sync-Token"  # nosec B105
DEFAULT_SYNC_SECRET = "default-dev-secret"  # nosec B105
CLUB_SLUG_PATTERN = r"^[a-z0-9-]{1,40}$"
CLUB_SLUG_MAX_LENGTH = 40

# Client-side storage keys
STORAGE_KEY = "nos-joueurs-en-tournoi"
CLUB_IDENTITY_KEY = "nos-joueurs-club-identity"
LEGACY_STORAGE_KEY = STORAGE_KEY

# Remote store (Firestore) layout
CLUBS_COLLECTION = "clubs"
EVENTS_COLLECTION = "events"
META_COLLECTION = "meta"
VALIDATIONS_DOCUMENT = "validations"
SETTINGS_DOCUMENT = "settings"
FIRESTORE_BATCH_LIMIT = 400

# Sharing
EXPORT_VERSION = "1.0"
SHARE_QUERY_PARAM = "share"
QR_CODE_MAX_URL_SIZE = 2900

# Domain sentinels
EXEMPT_OPPONENT = "EXEMPT"
