from urllib.parse import urlencode


def resolve_base_url(config) -> str:
    """
    Pick the public base URL for reset links.

    Order: PUBLIC_BASE_URL, then PLATFORM_URL (a bare host gets https://),
    then localhost on API_PORT (https only in production).
    """
    if config.PUBLIC_BASE_URL:
        return config.PUBLIC_BASE_URL.rstrip("/")

    if config.PLATFORM_URL:
        url = config.PLATFORM_URL.rstrip("/")
        if "://" not in url:
            url = f"https://{url}"
        return url

    protocol = "https" if config.ENVIRONMENT == "production" else "http"
    return f"{protocol}://localhost:{config.API_PORT}"


class ResetLinkBuilder:
    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def build(self, token: str) -> str:
        return f"{self.base_url}/reset-password?{urlencode({'token': token})}"
