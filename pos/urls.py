"""POS page URLs."""
from django.urls import path
from .views import pages

app_name = 'pos'

urlpatterns = [
    path('', pages.dashboard, name='dashboard'),
    path('roster/', pages.roster, name='roster'),
    path('reports/', pages.reports, name='reports'),
]
