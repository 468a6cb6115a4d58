"""
Core tests – session store, CSRF guard, the request gate, auth views,
roster manager and management commands.
"""
from datetime import date, time, timedelta
from decimal import Decimal
from io import StringIO

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import Client, TestCase
from django.utils import timezone

from core.exceptions import Conflict, CsrfInvalid, CsrfMissing, NotFound, ValidationFailed
from core.models import (
    LoginAuditLog, PaymentMethod, RosterDay, RosterEntry, RosterStatus, Service,
    ShopSession, ShopUser, Staff, Transaction,
)
from core.services.csrf_guard import CsrfGuard
from core.services.roster_manager import RosterManager
from core.services.session_store import SessionStore

PASSWORD = 'Massage-Shop-2024!'
NINETY_DAYS = 90 * 24 * 60 * 60


def make_user(username='reception', role=ShopUser.ROLE_RECEPTION, **extra):
    return ShopUser.objects.create_user(
        username=username, password=PASSWORD, role=role, **extra,
    )


class ShopTestCase(TestCase):
    """Shared helpers for signing in through the JSON API."""

    def api_login(self, client, username, password=PASSWORD):
        response = client.post(
            '/api/auth/login',
            {'username': username, 'password': password},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200, response.content)
        return response.json()


class ShopUserModelTest(TestCase):
    """Test the custom ShopUser model."""

    def test_create_user_defaults(self):
        user = make_user('somchai')
        self.assertTrue(user.check_password(PASSWORD))
        self.assertEqual(user.role, ShopUser.ROLE_RECEPTION)
        self.assertEqual(user.name, 'somchai')
        self.assertFalse(user.is_manager)

    def test_superuser_is_manager(self):
        user = ShopUser.objects.create_superuser(username='boss', password=PASSWORD)
        self.assertEqual(user.role, ShopUser.ROLE_MANAGER)
        self.assertTrue(user.is_manager)
        self.assertTrue(user.is_staff)


class SessionStoreTest(TestCase):
    """SessionStore create / lookup / destroy / purge."""

    def setUp(self):
        self.user = make_user()
        self.store = SessionStore()

    def test_create_session(self):
        session = self.store.create_session(self.user, ip_address='10.0.0.5')
        self.assertEqual(len(session.key), 48)
        self.assertEqual(session.role, ShopUser.ROLE_RECEPTION)
        self.assertEqual(session.expires_at - session.created_at, timedelta(days=90))
        self.assertTrue(session.csrf_token)
        self.assertTrue(ShopSession.objects.filter(pk=session.key).exists())

    def test_keys_are_unique(self):
        keys = {self.store.create_session(self.user).key for _ in range(5)}
        self.assertEqual(len(keys), 5)

    def test_get_session(self):
        session = self.store.create_session(self.user)
        found = self.store.get_session(session.key)
        self.assertEqual(found.pk, session.pk)
        self.assertEqual(found.user, self.user)

    def test_unknown_or_empty_key(self):
        self.assertIsNone(self.store.get_session('nope'))
        self.assertIsNone(self.store.get_session(''))
        self.assertIsNone(self.store.get_session(None))

    def test_expired_session_is_ignored(self):
        session = self.store.create_session(self.user)
        ShopSession.objects.filter(pk=session.key).update(
            expires_at=timezone.now() - timedelta(seconds=1),
        )
        self.assertIsNone(self.store.get_session(session.key))

    def test_inactive_user_session_is_ignored(self):
        session = self.store.create_session(self.user)
        ShopUser.objects.filter(pk=self.user.pk).update(is_active=False)
        self.assertIsNone(self.store.get_session(session.key))

    def test_destroy_is_idempotent(self):
        session = self.store.create_session(self.user)
        self.store.destroy_session(session.key)
        self.store.destroy_session(session.key)
        self.assertIsNone(self.store.get_session(session.key))

    def test_destroy_user_sessions(self):
        self.store.create_session(self.user)
        self.store.create_session(self.user)
        other = self.store.create_session(make_user('other'))
        self.assertEqual(self.store.destroy_user_sessions(self.user), 2)
        self.assertIsNotNone(self.store.get_session(other.key))

    def test_purge_expired(self):
        live = self.store.create_session(self.user)
        stale = self.store.create_session(self.user)
        ShopSession.objects.filter(pk=stale.key).update(
            expires_at=timezone.now() - timedelta(days=1),
        )
        self.assertEqual(self.store.purge_expired(), 1)
        self.assertTrue(ShopSession.objects.filter(pk=live.key).exists())
        self.assertFalse(ShopSession.objects.filter(pk=stale.key).exists())

    def test_deactivating_user_ends_sessions(self):
        self.store.create_session(self.user)
        self.user.is_active = False
        self.user.save()
        self.assertFalse(ShopSession.objects.filter(user=self.user).exists())


class CsrfGuardTest(TestCase):
    """The per-session token is stable and checked in constant time."""

    def setUp(self):
        self.guard = CsrfGuard()
        self.session = SessionStore(csrf_guard=self.guard).create_session(make_user())

    def test_token_is_stable(self):
        first = self.guard.token_for(self.session)
        second = self.guard.token_for(ShopSession.objects.get(pk=self.session.pk))
        self.assertEqual(first, second)

    def test_binds_token_when_missing(self):
        ShopSession.objects.filter(pk=self.session.pk).update(csrf_token='')
        session = ShopSession.objects.get(pk=self.session.pk)
        token = self.guard.token_for(session)
        self.assertEqual(len(token), 48)
        self.assertEqual(ShopSession.objects.get(pk=session.pk).csrf_token, token)

    def test_validate(self):
        token = self.guard.token_for(self.session)
        self.assertTrue(self.guard.validate(self.session, token))
        self.assertFalse(self.guard.validate(self.session, token + 'x'))
        self.assertFalse(self.guard.validate(self.session, ''))

    def test_check_raises(self):
        with self.assertRaises(CsrfMissing):
            self.guard.check(self.session, None)
        with self.assertRaises(CsrfInvalid):
            self.guard.check(self.session, 'wrong')


class AuthGateTest(ShopTestCase):
    """Request gate: authentication, negotiation and CSRF enforcement."""

    def setUp(self):
        self.user = make_user()
        self.client = Client()

    def test_browser_redirected_to_login(self):
        response = self.client.get('/pos/')
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith('/login/'))
        self.assertIn('next=/pos/', response['Location'])

    def test_api_client_gets_401(self):
        response = self.client.get('/pos/', HTTP_ACCEPT='application/json')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['code'], 'AUTH_REQUIRED')

    def test_api_path_without_accept_gets_401(self):
        response = self.client.get('/api/staff/roster')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['code'], 'AUTH_REQUIRED')

    def test_health_is_public(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'ok')

    def test_default_admin_path_is_hidden(self):
        self.assertEqual(self.client.get('/admin/').status_code, 404)
        response = self.client.get(f'/{settings.SECRET_ADMIN_URL}/')
        self.assertEqual(response.status_code, 302)
        self.assertIn('/login/', response['Location'])

    def test_write_without_token_is_rejected(self):
        self.api_login(self.client, 'reception')
        response = self.client.post('/api/staff/roster', {'staff_name': 'Nok'},
                                    content_type='application/json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['code'], 'CSRF_MISSING')

    def test_write_with_wrong_token_is_rejected(self):
        self.api_login(self.client, 'reception')
        response = self.client.post('/api/staff/roster', {'staff_name': 'Nok'},
                                    content_type='application/json',
                                    HTTP_X_CSRF_TOKEN='not-the-token')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['code'], 'CSRF_INVALID')

    def test_write_with_token_passes(self):
        Staff.objects.create(name='Nok')
        data = self.api_login(self.client, 'reception')
        response = self.client.post('/api/staff/roster', {'staff_name': 'Nok'},
                                    content_type='application/json',
                                    HTTP_X_CSRF_TOKEN=data['csrf_token'])
        self.assertEqual(response.status_code, 201)

    def test_same_token_on_every_response(self):
        data = self.api_login(self.client, 'reception')
        first = self.client.get('/api/auth/session')
        second = self.client.get('/api/staff/roster')
        self.assertEqual(first['X-CSRF-Token'], data['csrf_token'])
        self.assertEqual(second['X-CSRF-Token'], data['csrf_token'])
        self.assertEqual(first.json()['csrf_token'], data['csrf_token'])

    def test_bearer_token(self):
        data = self.api_login(Client(), 'reception')
        response = self.client.get('/api/auth/session',
                                   HTTP_AUTHORIZATION=f"Bearer {data['session_id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['username'], 'reception')

    def test_bearer_wins_over_cookie(self):
        data = self.api_login(Client(), 'reception')
        self.client.cookies['shop_session'] = 'stale-cookie-value'
        response = self.client.get('/api/auth/session',
                                   HTTP_AUTHORIZATION=f"Bearer {data['session_id']}")
        self.assertEqual(response.status_code, 200)


class AuthApiTest(ShopTestCase):
    """JSON login, logout and session endpoints."""

    def setUp(self):
        self.user = make_user(display_name='Front Desk')
        self.manager = make_user('manager', role=ShopUser.ROLE_MANAGER)
        self.client = Client()

    def test_login_sets_cookie(self):
        response = self.client.post(
            '/api/auth/login', {'username': 'reception', 'password': PASSWORD},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['success'])
        self.assertEqual(body['user']['role'], 'reception')
        self.assertEqual(body['user']['display_name'], 'Front Desk')

        cookie = response.cookies['shop_session']
        self.assertEqual(cookie.value, body['session_id'])
        self.assertEqual(str(cookie['max-age']), str(NINETY_DAYS))
        self.assertTrue(cookie['httponly'])
        self.assertEqual(cookie['samesite'], 'Strict')
        self.assertEqual(cookie['path'], '/')

        session = ShopSession.objects.get(pk=body['session_id'])
        self.assertEqual(session.csrf_token, body['csrf_token'])

    def test_login_records_audit(self):
        self.api_login(self.client, 'reception')
        self.assertTrue(LoginAuditLog.objects.filter(user=self.user, success=True).exists())

    def test_bad_credentials(self):
        response = self.client.post(
            '/api/auth/login', {'username': 'reception', 'password': 'wrong'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['code'], 'INVALID_CREDENTIALS')
        self.assertFalse(ShopSession.objects.exists())
        self.assertTrue(LoginAuditLog.objects.filter(
            username_attempted='reception', success=False).exists())

    def test_missing_fields(self):
        response = self.client.post('/api/auth/login', {'username': 'reception'},
                                    content_type='application/json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')

    def test_invalid_json(self):
        response = self.client.post('/api/auth/login', 'not json',
                                    content_type='application/json')
        self.assertEqual(response.status_code, 400)

    def test_logout_ends_session(self):
        data = self.api_login(self.client, 'reception')
        response = self.client.post('/api/auth/logout', HTTP_X_CSRF_TOKEN=data['csrf_token'])
        self.assertEqual(response.status_code, 200)
        cookie = response.cookies['shop_session']
        self.assertEqual(cookie.value, '')
        self.assertEqual(str(cookie['max-age']), '0')
        self.assertNotIn('X-CSRF-Token', response)

        again = Client().get('/api/auth/session',
                             HTTP_AUTHORIZATION=f"Bearer {data['session_id']}")
        self.assertEqual(again.status_code, 401)

    def test_logout_requires_token(self):
        self.api_login(self.client, 'reception')
        response = self.client.post('/api/auth/logout')
        self.assertEqual(response.status_code, 403)

    def test_session_info(self):
        self.api_login(self.client, 'reception')
        body = self.client.get('/api/auth/session').json()
        self.assertEqual(body['role'], 'reception')
        self.assertGreater(body['expires_in'], NINETY_DAYS - 60)

    def test_active_sessions_manager_only(self):
        self.api_login(self.client, 'reception')
        response = self.client.get('/api/auth/sessions')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()['code'], 'FORBIDDEN')

        manager_client = Client()
        self.api_login(manager_client, 'manager')
        body = manager_client.get('/api/auth/sessions').json()
        self.assertEqual(body['count'], 2)

    def test_end_user_sessions(self):
        self.api_login(self.client, 'reception')
        manager_client = Client()
        manager = self.api_login(manager_client, 'manager')

        response = manager_client.delete(f'/api/auth/sessions/user/{self.user.pk}',
                                         HTTP_X_CSRF_TOKEN=manager['csrf_token'])
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['ended'], 1)
        self.assertEqual(self.client.get('/api/auth/session').status_code, 401)

    def test_end_sessions_unknown_user(self):
        manager = self.api_login(self.client, 'manager')
        response = self.client.delete('/api/auth/sessions/user/9999',
                                      HTTP_X_CSRF_TOKEN=manager['csrf_token'])
        self.assertEqual(response.status_code, 404)


class BrowserLoginTest(TestCase):
    """Form login / logout for the POS pages."""

    def setUp(self):
        self.user = make_user()

    def test_login_page_renders(self):
        response = self.client.get('/login/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'name="password"')

    def test_login_and_open_dashboard(self):
        response = self.client.post('/login/', {'username': 'reception', 'password': PASSWORD})
        self.assertRedirects(response, '/pos/', fetch_redirect_response=False)
        self.assertIn('shop_session', response.cookies)

        page = self.client.get('/pos/')
        self.assertEqual(page.status_code, 200)
        session = ShopSession.objects.get(user=self.user)
        self.assertContains(page, f'content="{session.csrf_token}"')

    def test_login_ignores_offsite_next(self):
        response = self.client.post('/login/', {
            'username': 'reception', 'password': PASSWORD, 'next': 'https://evil.example/',
        })
        self.assertRedirects(response, '/pos/', fetch_redirect_response=False)

    def test_bad_password_shows_form(self):
        response = self.client.post('/login/', {'username': 'reception', 'password': 'nope'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid username or password')
        self.assertNotIn('shop_session', response.cookies)

    def test_logout_with_form_token(self):
        self.client.post('/login/', {'username': 'reception', 'password': PASSWORD})
        token = ShopSession.objects.get(user=self.user).csrf_token

        response = self.client.post('/logout/', {'csrf_token': token})
        self.assertRedirects(response, '/login/', fetch_redirect_response=False)
        self.assertFalse(ShopSession.objects.filter(user=self.user).exists())

    def test_logout_without_token_forbidden(self):
        self.client.post('/login/', {'username': 'reception', 'password': PASSWORD})
        response = self.client.post('/logout/')
        self.assertEqual(response.status_code, 403)
        self.assertTrue(ShopSession.objects.filter(user=self.user).exists())


class RosterManagerTest(TestCase):
    """Queue operations keep positions contiguous and reject bad input."""

    def setUp(self):
        self.names = ['Nok', 'Ploy', 'Fah', 'Mali']
        self.staff = [Staff.objects.create(name=n) for n in self.names]
        self.manager = RosterManager()

    def names_in_order(self):
        return [e.staff.name for e in self.manager.entries()]

    def fill(self, count=3):
        for s in self.staff[:count]:
            self.manager.add_to_roster(s)

    def test_add_appends(self):
        self.fill()
        entries = self.manager.entries()
        self.assertEqual([e.position for e in entries], [1, 2, 3])
        self.assertTrue(all(e.status == RosterStatus.WAITING for e in entries))
        self.assertTrue(self.manager.check_contiguity())

    def test_add_by_name_or_id(self):
        self.manager.add_to_roster('Nok')
        self.manager.add_to_roster(self.staff[1].pk)
        self.assertEqual(self.names_in_order(), ['Nok', 'Ploy'])

    def test_add_duplicate_conflicts(self):
        self.fill(1)
        with self.assertRaises(Conflict):
            self.manager.add_to_roster('Nok')
        self.assertEqual(self.manager.size(), 1)

    def test_add_unknown_or_inactive(self):
        self.staff[0].deactivate()
        with self.assertRaises(NotFound):
            self.manager.add_to_roster('Nok')
        with self.assertRaises(NotFound):
            self.manager.add_to_roster('Nobody')
        with self.assertRaises(ValidationFailed):
            self.manager.add_to_roster('')

    def test_remove_shifts_later_entries(self):
        self.fill(4)
        self.manager.remove_from_roster(2)
        entries = self.manager.entries()
        self.assertEqual([e.staff.name for e in entries], ['Nok', 'Fah', 'Mali'])
        self.assertEqual([e.position for e in entries], [1, 2, 3])

    def test_remove_missing_position(self):
        self.fill()
        with self.assertRaises(NotFound):
            self.manager.remove_from_roster(7)
        with self.assertRaises(ValidationFailed):
            self.manager.remove_from_roster(0)
        self.assertEqual(self.manager.size(), 3)

    def test_move_up_and_down(self):
        self.fill()
        self.manager.move_up(3)
        self.assertEqual(self.names_in_order(), ['Nok', 'Fah', 'Ploy'])
        self.manager.move_down(1)
        self.assertEqual(self.names_in_order(), ['Fah', 'Nok', 'Ploy'])
        self.assertTrue(self.manager.check_contiguity())

    def test_move_at_boundary_conflicts(self):
        self.fill()
        with self.assertRaises(Conflict):
            self.manager.move_up(1)
        with self.assertRaises(Conflict):
            self.manager.move_down(3)
        self.assertEqual(self.names_in_order(), ['Nok', 'Ploy', 'Fah'])

    def test_set_status(self):
        self.fill()
        entry = self.manager.set_status(2, RosterStatus.BREAK)
        self.assertEqual(entry.status, 'Break')
        self.manager.set_status(2, RosterStatus.WAITING)
        self.assertEqual(RosterEntry.objects.get(pk=entry.pk).status, 'Waiting')

    def test_set_invalid_status(self):
        self.fill()
        with self.assertRaises(ValidationFailed):
            self.manager.set_status(1, 'Sleeping')
        self.assertEqual(self.manager.entries()[0].status, RosterStatus.WAITING)

    def test_serve_next_picks_earliest_waiting(self):
        self.fill()
        self.manager.set_status(1, RosterStatus.SERVING)
        self.manager.set_status(2, RosterStatus.BREAK)
        served = self.manager.serve_next()
        self.assertEqual(served.staff.name, 'Fah')
        self.assertEqual(
            [e.status for e in self.manager.entries()],
            [RosterStatus.SERVING, RosterStatus.BREAK, RosterStatus.SERVING],
        )

    def test_serve_next_serves_one_entry(self):
        self.fill()
        self.manager.set_status(2, RosterStatus.SERVING)
        served = self.manager.serve_next()
        self.assertEqual(served.position, 1)
        self.assertEqual(
            [e.status for e in self.manager.entries()],
            [RosterStatus.SERVING, RosterStatus.SERVING, RosterStatus.WAITING],
        )

    def test_serve_next_nobody_waiting(self):
        self.fill(1)
        self.manager.set_status(1, RosterStatus.FINISHED)
        self.assertIsNone(self.manager.serve_next())
        self.assertEqual(self.manager.entries()[0].status, RosterStatus.FINISHED)

    def test_clear_roster_only_touches_its_day(self):
        self.fill()
        yesterday = RosterManager(timezone.localdate() - timedelta(days=1))
        yesterday.add_to_roster('Mali')
        self.assertEqual(self.manager.clear_roster(), 3)
        self.assertEqual(self.manager.size(), 0)
        self.assertEqual(yesterday.size(), 1)

    def test_entries_count_active_sales(self):
        self.fill(1)
        now = timezone.now()
        statuses = (Transaction.STATUS_ACTIVE, Transaction.STATUS_ACTIVE, Transaction.STATUS_VOID)
        for i, status in enumerate(statuses):
            Transaction.objects.create(
                transaction_id=f'T-{i}',
                timestamp=now, date=timezone.localdate(now),
                staff_name='Nok', service_name='Thai Massage', location='In-Shop',
                duration_minutes=60, payment_amount=Decimal('250'), payment_method='Cash',
                masseuse_fee=Decimal('100'), start_time=time(10, 0), end_time=time(11, 0),
                status=status,
            )
        self.assertEqual(self.manager.entries()[0].services_today, 2)

    def snapshot(self):
        return list(
            RosterEntry.objects.filter(roster_date=self.manager.roster_date)
            .order_by('position').values_list('staff__name', 'position', 'status')
        )

    def test_mixed_sequence_keeps_positions_contiguous(self):
        expected = []

        def apply(operation, *args):
            getattr(self.manager, operation)(*args)
            self.assertTrue(self.manager.check_contiguity(), (operation, args))
            self.assertEqual(self.names_in_order(), expected, (operation, args))

        for name in self.names:
            expected.append(name)
            apply('add_to_roster', name)

        expected.pop(0)
        apply('remove_from_roster', 1)                   # first
        expected.pop(1)
        apply('remove_from_roster', 2)                   # middle
        expected.append('Nok')
        apply('add_to_roster', 'Nok')
        expected[1], expected[2] = expected[2], expected[1]
        apply('move_up', 3)
        expected[0], expected[1] = expected[1], expected[0]
        apply('move_down', 1)
        expected.pop()
        apply('remove_from_roster', len(expected) + 1)   # last
        expected.extend(['Fah'])
        apply('add_to_roster', 'Fah')
        expected.clear()
        apply('clear_roster')
        expected.append('Mali')
        apply('add_to_roster', 'Mali')
        self.assertEqual([e.position for e in self.manager.entries()], [1])

    def test_failed_mutations_leave_roster_unchanged(self):
        self.fill()
        self.manager.set_status(2, RosterStatus.BREAK)
        before = self.snapshot()
        failures = [
            (Conflict, 'move_up', 1),
            (Conflict, 'move_down', 3),
            (NotFound, 'move_up', 9),
            (NotFound, 'remove_from_roster', 4),
            (ValidationFailed, 'remove_from_roster', -1),
            (Conflict, 'add_to_roster', 'Ploy'),
            (ValidationFailed, 'set_status', 1, 'Asleep'),
        ]
        for error, operation, *args in failures:
            with self.assertRaises(error, msg=operation):
                getattr(self.manager, operation)(*args)
            self.assertEqual(self.snapshot(), before, operation)

    def test_mutations_lock_the_day(self):
        self.assertFalse(RosterDay.objects.exists())
        self.assertEqual(self.manager.clear_roster(), 0)
        self.assertTrue(RosterDay.objects.filter(roster_date=self.manager.roster_date).exists())
        self.fill(2)
        self.assertEqual(RosterDay.objects.count(), 1)

    def test_add_racing_a_duplicate_conflicts(self):
        self.fill(1)

        class StaleRoster(RosterManager):
            # sees the roster as it was before the first add committed
            def _locked_entries(self):
                super()._locked_entries()
                return []

        with self.assertRaises(Conflict):
            StaleRoster(self.manager.roster_date).add_to_roster('Nok')
        self.assertEqual(self.snapshot(), [('Nok', 1, RosterStatus.WAITING)])


class ManagementCommandTest(TestCase):
    """init_shop, clear_roster, purge_sessions and create_admin."""

    def test_init_shop_is_idempotent(self):
        call_command('init_shop', stdout=StringIO())
        services = Service.objects.count()
        methods = PaymentMethod.objects.count()
        self.assertGreater(services, 0)
        self.assertTrue(PaymentMethod.objects.filter(name='Cash').exists())

        call_command('init_shop', stdout=StringIO())
        self.assertEqual(Service.objects.count(), services)
        self.assertEqual(PaymentMethod.objects.count(), methods)

    def test_clear_roster_defaults_to_past_days(self):
        nok = Staff.objects.create(name='Nok')
        RosterManager(timezone.localdate() - timedelta(days=2)).add_to_roster(nok)
        RosterManager().add_to_roster(nok)

        call_command('clear_roster', stdout=StringIO())
        self.assertEqual(RosterEntry.objects.count(), 1)
        self.assertEqual(RosterEntry.objects.get().roster_date, timezone.localdate())

    def test_clear_roster_for_date(self):
        nok = Staff.objects.create(name='Nok')
        RosterManager(date(2024, 3, 1)).add_to_roster(nok)
        call_command('clear_roster', '--date', '2024-03-01', stdout=StringIO())
        self.assertFalse(RosterEntry.objects.exists())

    def test_clear_roster_bad_date(self):
        with self.assertRaises(CommandError):
            call_command('clear_roster', '--date', '01/03/2024', stdout=StringIO())

    def test_purge_sessions(self):
        store = SessionStore()
        session = store.create_session(make_user())
        ShopSession.objects.filter(pk=session.key).update(expires_at=timezone.now() - timedelta(hours=1))
        out = StringIO()
        call_command('purge_sessions', stdout=out)
        self.assertIn('1 expired session', out.getvalue())
        self.assertFalse(ShopSession.objects.exists())

    def test_create_admin(self):
        call_command('create_admin', '--username', 'owner', '--password', PASSWORD, stdout=StringIO())
        owner = ShopUser.objects.get(username='owner')
        self.assertTrue(owner.is_superuser)
        self.assertEqual(owner.role, ShopUser.ROLE_MANAGER)

    def test_create_reception_account(self):
        call_command('create_admin', '--username', 'desk2', '--password', PASSWORD,
                     '--reception', stdout=StringIO())
        desk = ShopUser.objects.get(username='desk2')
        self.assertFalse(desk.is_superuser)
        self.assertEqual(desk.role, ShopUser.ROLE_RECEPTION)

    def test_create_admin_rejects_weak_password(self):
        with self.assertRaises(CommandError):
            call_command('create_admin', '--username', 'weak', '--password', '123', stdout=StringIO())
        self.assertFalse(ShopUser.objects.filter(username='weak').exists())
