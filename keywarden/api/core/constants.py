API_VERSION_HEADER = "X-Keywarden-Version"

# Credential headers
API_KEY_HEADER = "X-Api-Key"
INSTALLER_KEY_HEADER = "X-Installer-Key"

# Issued key format: kw_<32 hex id>_<secret>
ISSUED_KEY_PREFIX = "kw_"

ONE_TIME_KEY_WARNING = (
    "This is the only time you will see this key. Store it securely."
)

# Paths that never pass through tenant resolution
SKIP_AUTH_PATHS = {
    "/",
    "/openapi.json",
    "/docs",
    "/redoc",
    "/health",
    "/health/liveness",
}

# Surfaces that authenticate themselves (installer key or reach secret)
SKIP_AUTH_PREFIXES = (
    "/docs",
    "/keys",
    "/reach",
)
