from urllib.parse import urlsplit


def join_urls(first: str, second: str) -> str:
    """Join a base location and a relative path with exactly one slash.
    
    An absolute second part (one with a scheme) is returned unchanged.
    """
    if urlsplit(second).scheme:
        return second
    
    if first.endswith('/'):
        first = first[:-1]
    if second.startswith('/'):
        second = second[1:]
    
    if not first:
        return second
    return f"{first}/{second}"
