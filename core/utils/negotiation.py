"""
Content negotiation for the auth gate and error rendering.

Browsers navigating to a page send an Accept header that prefers text/html;
fetch()/API clients prefer application/json. When the header names neither
(missing, or only */*), the URL decides: /api/ is an API, everything else a page.
"""

HTML_TYPES = ('text/html', 'application/xhtml+xml')
JSON_TYPES = ('application/json',)

API_PREFIX = '/api/'


def _accept_qualities(accept_header):
    """Map each explicitly listed media type to its q value."""
    qualities = {}
    for part in accept_header.split(','):
        pieces = [p.strip() for p in part.split(';')]
        media_type = pieces[0].lower()
        if not media_type:
            continue
        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.partition('=')
            if name.strip().lower() == 'q':
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        qualities[media_type] = max(quality, qualities.get(media_type, 0.0))
    return qualities


def preferred_format(request):
    """'html', 'json' or None when the Accept header does not choose."""
    qualities = _accept_qualities(request.META.get('HTTP_ACCEPT', ''))
    html_q = max((qualities.get(t, 0.0) for t in HTML_TYPES), default=0.0)
    json_q = max((qualities.get(t, 0.0) for t in JSON_TYPES), default=0.0)
    if html_q > json_q:
        return 'html'
    if json_q > html_q:
        return 'json'
    return None


def wants_html(request):
    """True if the client should get redirects / rendered pages."""
    fmt = preferred_format(request)
    if fmt is not None:
        return fmt == 'html'
    return not request.path.startswith(API_PREFIX)
