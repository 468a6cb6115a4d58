"""
Root URL configuration for the massage shop project.
"""
from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from core import views as core_views

urlpatterns = [
    path('', RedirectView.as_view(url='/login/', permanent=False), name='home'),
    path('login/', core_views.login_view, name='login'),
    path('logout/', core_views.logout_view, name='logout'),
    path('health/', core_views.health, name='health'),
    # Shop auth API
    path('api/auth/login', core_views.api_login, name='api_login'),
    path('api/auth/logout', core_views.api_logout, name='api_logout'),
    path('api/auth/session', core_views.api_session, name='api_session'),
    path('api/auth/sessions', core_views.api_active_sessions, name='api_active_sessions'),
    path('api/auth/sessions/user/<int:user_id>', core_views.api_end_user_sessions, name='api_end_user_sessions'),
    # Secret admin URL – path driven entirely by SECRET_ADMIN_URL in .env
    path(f"{settings.SECRET_ADMIN_URL}/", admin.site.urls),
    path('pos/', include('pos.urls')),
    path('api/', include('pos.api_urls')),
]

# Custom error handlers
handler404 = 'core.error_handlers.handler404'
handler500 = 'core.error_handlers.handler500'
handler403 = 'core.error_handlers.handler403'
handler400 = 'core.error_handlers.handler400'
