"""
Management command: purge_sessions

Deletes expired shop sessions. Lookups already ignore them; this only
keeps the table small.
"""
from django.core.management.base import BaseCommand

from core.services.session_store import SessionStore


class Command(BaseCommand):
    help = 'Delete expired shop sessions'

    def handle(self, *args, **options):
        removed = SessionStore().purge_expired()
        self.stdout.write(self.style.SUCCESS(f'Done. {removed} expired session(s) removed.'))
