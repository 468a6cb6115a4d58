"""
Custom template context processors.
"""


def shop_session(request):
    """
    Exposes the signed-in shop user and the session's CSRF token to every
    template, so pages can embed the token in a <meta> tag and forms.
    """
    session = getattr(request, 'shop_session', None)
    guard = getattr(request, 'csrf_guard', None)
    if session is None or guard is None:
        return {'SHOP_USER': None, 'SHOP_CSRF_TOKEN': ''}
    return {
        'SHOP_USER': session.user,
        'SHOP_CSRF_TOKEN': guard.token_for(session),
    }
