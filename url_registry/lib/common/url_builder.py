"""Building and parsing short link addresses."""

from typing import Mapping, Optional


def build_short_url(short_code: str, base_url: str, path_prefix: str = "") -> str:
    """Join origin, optional route prefix and identifier.
    
    build_short_url("abc12", "https://sho.rt/", "/r") -> "https://sho.rt/r/abc12"
    """
    parts = [base_url.rstrip("/")]
    prefix = path_prefix.strip("/")
    if prefix:
        parts.append(prefix)
    parts.append(short_code)
    return "/".join(parts)


def extract_short_id(
    short_url: str,
    base_url: str,
    path_prefix: str = "",
) -> Optional[str]:
    """Recover the short identifier from a short URL.
    
    Strips the origin and route prefix; the inverse of build_short_url.
    
    Args:
        short_url: Complete short URL
        base_url: Base URL the link was built with
        path_prefix: Route prefix the link was built with
        
    Returns:
        The short identifier, or None if the URL does not match the base and prefix
    """
    head = build_short_url("", base_url, path_prefix)
    if not short_url.startswith(head):
        return None
    
    remainder = short_url[len(head):].split("?", 1)[0].split("#", 1)[0].rstrip("/")
    if not remainder or "/" in remainder:
        return None
    return remainder


def request_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the origin a visitor used to reach the service.
    
    X-Forwarded-Proto/X-Forwarded-Host from a proxy win over the request's
    own scheme and Host header, which win over the configured base URL.
    
    Args:
        headers: Request headers (any case)
        fallback_base_url: Base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request Host header
        
    Returns:
        Origin without trailing slash (e.g., https://sho.rt)
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    proto = lowered.get("x-forwarded-proto")
    host = lowered.get("x-forwarded-host")
    
    if not (proto and host):
        proto, host = request_scheme, request_host
    if proto and host:
        # Proxies may send a comma-separated chain; the first hop is the client's
        return f"{proto.split(',')[0].strip()}://{host.split(',')[0].strip()}"
    
    return fallback_base_url.rstrip("/")
