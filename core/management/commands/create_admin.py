"""
Management command: create_admin

Creates a shop account. By default a manager with Django admin access;
--reception creates a front-desk account instead.
"""
import getpass

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from core.models import ShopUser


class Command(BaseCommand):
    help = 'Create a manager (or, with --reception, a front-desk) account'

    def add_arguments(self, parser):
        parser.add_argument('--username', type=str, default='admin')
        parser.add_argument('--password', type=str, default=None,
                            help='Prompted for when omitted')
        parser.add_argument('--display-name', type=str, default='')
        parser.add_argument('--reception', action='store_true',
                            help='Create a reception account without admin access')

    def _read_password(self):
        password = getpass.getpass('Password: ')
        if password != getpass.getpass('Confirm password: '):
            raise CommandError('Passwords do not match.')
        return password

    def handle(self, *args, **options):
        username = options['username'].strip()
        if ShopUser.objects.filter(username=username).exists():
            self.stdout.write(self.style.WARNING(f'User "{username}" already exists.'))
            return

        password = options['password'] or self._read_password()
        candidate = ShopUser(username=username, display_name=options['display_name'])
        try:
            validate_password(password, user=candidate)
        except ValidationError as exc:
            raise CommandError(' '.join(exc.messages))

        fields = {'display_name': options['display_name'] or username}
        if options['reception']:
            user = ShopUser.objects.create_user(
                username=username, password=password,
                role=ShopUser.ROLE_RECEPTION, **fields,
            )
        else:
            user = ShopUser.objects.create_superuser(
                username=username, password=password, **fields,
            )
        self.stdout.write(self.style.SUCCESS(
            f'Account created: {user.username} ({user.role_display})'
        ))
