"""
POS app tests – roster, sales, corrections, expenses, staff payouts,
catalogue and reports through the JSON API, plus the page views.
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from core.models import (
    AuditLog, Expense, PaymentMethod, RosterEntry, Service, ShopUser,
    Staff, StaffPayment, Transaction,
)
from core.services.roster_manager import RosterManager

PASSWORD = 'Massage-Shop-2024!'


class PosTestBase(TestCase):
    """Shared fixtures: two users, two staff, a small price list."""

    @classmethod
    def setUpTestData(cls):
        cls.reception = ShopUser.objects.create_user(
            username='desk', password=PASSWORD, display_name='Front Desk',
        )
        cls.manager = ShopUser.objects.create_user(
            username='boss', password=PASSWORD, role=ShopUser.ROLE_MANAGER,
        )
        cls.nok = Staff.objects.create(name='Nok')
        cls.ploy = Staff.objects.create(name='Ploy')
        cls.thai = Service.objects.create(
            name='Thai Massage', duration_minutes=60, location=Service.LOCATION_IN_SHOP,
            price=Decimal('250.00'), masseuse_fee=Decimal('100.00'),
        )
        cls.oil_home = Service.objects.create(
            name='Oil Massage', duration_minutes=60, location=Service.LOCATION_HOME,
            price=Decimal('600.00'), masseuse_fee=Decimal('250.00'),
        )
        PaymentMethod.objects.create(name='Cash')
        PaymentMethod.objects.create(name='Credit Card')
        PaymentMethod.objects.create(name='Crypto', active=False)

    def login(self, username='desk'):
        self.client = Client()
        r = self.client.post(
            '/api/auth/login', {'username': username, 'password': PASSWORD},
            content_type='application/json',
        )
        self.assertEqual(r.status_code, 200, r.content)
        self.csrf = r.json()['csrf_token']

    def api(self, method, url, data=None):
        return getattr(self.client, method)(
            url, data if data is not None else {}, content_type='application/json',
            HTTP_X_CSRF_TOKEN=self.csrf,
        )

    def sale(self, staff='Nok', service=None, method='Cash', **extra):
        service = service or self.thai
        payload = {
            'staff_name': staff,
            'service_name': service.name,
            'location': service.location,
            'duration_minutes': service.duration_minutes,
            'payment_method': method,
            'start_time': '10:00',
            'end_time': '11:00',
        }
        payload.update(extra)
        return self.api('post', '/api/transactions', payload)


class RosterApiTest(PosTestBase):
    """Roster endpoints."""

    def setUp(self):
        self.login()

    def test_add_and_list(self):
        r = self.api('post', '/api/staff/roster', {'staff_name': 'Nok'})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['position'], 1)
        self.api('post', '/api/staff/roster', {'staff_id': self.ploy.pk})

        body = self.client.get('/api/staff/roster').json()
        self.assertEqual(body['count'], 2)
        self.assertEqual([e['staff_name'] for e in body['roster']], ['Nok', 'Ploy'])
        self.assertTrue(AuditLog.objects.filter(action='ROSTER', user=self.reception).exists())

    def test_add_twice_conflicts(self):
        self.api('post', '/api/staff/roster', {'staff_name': 'Nok'})
        r = self.api('post', '/api/staff/roster', {'staff_name': 'Nok'})
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()['code'], 'CONFLICT')

    def test_move_and_boundaries(self):
        self.api('post', '/api/staff/roster', {'staff_name': 'Nok'})
        self.api('post', '/api/staff/roster', {'staff_name': 'Ploy'})

        r = self.api('post', '/api/staff/roster/2/move-up')
        self.assertEqual([e['staff_name'] for e in r.json()['roster']], ['Ploy', 'Nok'])
        self.assertEqual(self.api('post', '/api/staff/roster/1/move-up').status_code, 409)
        self.assertEqual(self.api('post', '/api/staff/roster/2/move-down').status_code, 409)
        self.assertEqual(self.api('post', '/api/staff/roster/5/move-down').status_code, 404)

    def test_status_and_serve_next(self):
        self.api('post', '/api/staff/roster', {'staff_name': 'Nok'})
        self.api('post', '/api/staff/roster', {'staff_name': 'Ploy'})

        r = self.api('put', '/api/staff/roster/1', {'status': 'Break'})
        self.assertEqual(r.json()['status'], 'Break')
        self.assertEqual(self.api('put', '/api/staff/roster/1', {'status': 'Asleep'}).status_code, 400)
        self.assertEqual(self.api('put', '/api/staff/roster/1', {}).status_code, 400)

        r = self.api('post', '/api/staff/roster/serve-next')
        self.assertEqual(r.json()['served']['staff_name'], 'Ploy')
        r = self.api('post', '/api/staff/roster/serve-next')
        self.assertIsNone(r.json()['served'])

    def test_remove_and_clear(self):
        for name in ('Nok', 'Ploy'):
            self.api('post', '/api/staff/roster', {'staff_name': name})
        r = self.api('delete', '/api/staff/roster/1')
        self.assertEqual(r.json()['roster'][0]['staff_name'], 'Ploy')
        self.assertEqual(r.json()['roster'][0]['position'], 1)

        r = self.api('delete', '/api/staff/roster')
        self.assertEqual(r.json()['removed'], 1)
        self.assertFalse(RosterEntry.objects.exists())


class TransactionApiTest(PosTestBase):
    """Recording, correcting and voiding sales."""

    def setUp(self):
        self.login()

    def test_sale_copies_price_and_fee(self):
        RosterManager().add_to_roster(self.nok)
        r = self.sale(payment_amount='1.00', masseuse_fee='999')
        self.assertEqual(r.status_code, 201, r.content)
        body = r.json()
        self.assertEqual(body['payment_amount'], '250.00')
        self.assertEqual(body['masseuse_fee'], '100.00')
        self.assertEqual(body['status'], 'ACTIVE')
        self.assertIsNone(body['corrected_from'])

        self.nok.refresh_from_db()
        self.assertEqual(self.nok.total_fees_earned, Decimal('100.00'))
        self.assertEqual(RosterEntry.objects.get(staff=self.nok).services_today, 1)
        self.assertTrue(AuditLog.objects.filter(action='SALE').exists())

    def test_sale_validation(self):
        r = self.api('post', '/api/transactions', {'staff_name': 'Nok'})
        self.assertEqual(r.status_code, 400)
        self.assertIn('Missing required fields', r.json()['error'])

        self.assertEqual(self.sale(staff='Nobody').status_code, 400)
        self.assertEqual(self.sale(method='Crypto').status_code, 400)
        self.assertEqual(self.sale(duration_minutes=45).status_code, 400)
        self.assertEqual(self.sale(start_time='ten').status_code, 400)
        self.assertFalse(Transaction.objects.exists())

    def test_correction_replaces_original(self):
        original = self.sale().json()
        r = self.sale(staff='Ploy', service=self.oil_home,
                      original_transaction_id=original['transaction_id'])
        self.assertEqual(r.status_code, 201, r.content)
        self.assertEqual(r.json()['corrected_from'], original['transaction_id'])

        old = Transaction.objects.get(transaction_id=original['transaction_id'])
        self.assertEqual(old.status, Transaction.STATUS_EDITED)
        self.nok.refresh_from_db()
        self.ploy.refresh_from_db()
        self.assertEqual(self.nok.total_fees_earned, Decimal('0.00'))
        self.assertEqual(self.ploy.total_fees_earned, Decimal('250.00'))
        self.assertTrue(AuditLog.objects.filter(action='CORRECT').exists())

    def test_correction_of_edited_or_unknown(self):
        original = self.sale().json()
        self.sale(original_transaction_id=original['transaction_id'])
        again = self.sale(original_transaction_id=original['transaction_id'])
        self.assertEqual(again.status_code, 409)
        self.assertEqual(self.sale(original_transaction_id='missing').status_code, 404)
        self.assertEqual(Transaction.objects.count(), 2)

    def test_void(self):
        tx = self.sale().json()['transaction_id']
        r = self.api('post', f'/api/transactions/{tx}/void')
        self.assertEqual(r.json()['status'], 'VOID')
        self.nok.refresh_from_db()
        self.assertEqual(self.nok.total_fees_earned, Decimal('0.00'))
        self.assertEqual(self.api('post', f'/api/transactions/{tx}/void').status_code, 409)

    def test_latest_for_correction(self):
        self.assertEqual(self.client.get('/api/transactions/latest-for-correction').status_code, 404)
        self.sale()
        latest = self.sale(staff='Ploy').json()
        r = self.client.get('/api/transactions/latest-for-correction')
        self.assertEqual(r.json()['transaction_id'], latest['transaction_id'])

    def test_list_filters_and_pagination(self):
        first = self.sale().json()
        self.sale()
        self.sale()
        self.api('post', f"/api/transactions/{first['transaction_id']}/void")

        body = self.client.get('/api/transactions?limit=2').json()
        self.assertEqual(body['pagination'], {'page': 1, 'limit': 2, 'total': 3, 'pages': 2})
        body = self.client.get('/api/transactions?status=ACTIVE').json()
        self.assertEqual(body['pagination']['total'], 2)
        self.assertEqual(self.client.get('/api/transactions?status=bogus').status_code, 400)
        self.assertEqual(len(self.client.get('/api/transactions/recent').json()), 2)


class ExpenseApiTest(PosTestBase):
    """Expenses."""

    def setUp(self):
        self.login()

    def test_create_list_delete(self):
        r = self.api('post', '/api/expenses', {'description': 'Towels', 'amount': '120.5'})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['amount'], '120.50')

        self.assertEqual(len(self.client.get('/api/expenses').json()), 1)
        summary = self.client.get('/api/expenses/summary/today').json()
        self.assertEqual(summary['total_expenses'], '120.50')

        self.assertEqual(self.api('delete', f"/api/expenses/{r.json()['id']}").status_code, 200)
        self.assertFalse(Expense.objects.exists())
        self.assertEqual(self.api('delete', '/api/expenses/999').status_code, 404)

    def test_amount_must_be_positive(self):
        r = self.api('post', '/api/expenses', {'description': 'Oops', 'amount': '-5'})
        self.assertEqual(r.status_code, 400)

    def test_amount_must_be_finite(self):
        for amount in ('NaN', 'Infinity', '-inf', 'sNaN'):
            r = self.api('post', '/api/expenses', {'description': 'Towels', 'amount': amount})
            self.assertEqual(r.status_code, 400, amount)
            self.assertEqual(r.json()['code'], 'VALIDATION_ERROR')
        self.assertFalse(Expense.objects.exists())


class ReportApiTest(PosTestBase):
    """Daily / weekly / monthly reports only count ACTIVE sales."""

    def setUp(self):
        self.login()
        self.sale()
        self.sale(staff='Ploy', service=self.oil_home, method='Credit Card')
        voided = self.sale().json()['transaction_id']
        self.api('post', f'/api/transactions/{voided}/void')
        self.api('post', '/api/expenses', {'description': 'Oil', 'amount': '50'})

    def test_daily(self):
        body = self.client.get('/api/reports/daily').json()
        self.assertEqual(body['transaction_summary']['transaction_count'], 2)
        self.assertEqual(body['transaction_summary']['total_revenue'], '850.00')
        self.assertEqual(body['transaction_summary']['total_fees'], '350.00')
        self.assertEqual(body['expense_summary']['total_expenses'], '50.00')
        self.assertEqual(body['net_profit'], '450.00')
        methods = {row['payment_method']: row['revenue'] for row in body['payment_breakdown']}
        self.assertEqual(methods, {'Cash': '250.00', 'Credit Card': '600.00'})

    def test_summary_and_performance(self):
        summary = self.client.get('/api/reports/summary/today').json()
        self.assertEqual(summary['total_revenue'], '850.00')
        performance = self.client.get('/api/staff/performance/today').json()
        self.assertEqual(performance[0]['staff_name'], 'Ploy')
        self.assertEqual(performance[0]['total_fees'], '250.00')

    def test_daily_pdf(self):
        r = self.client.get('/api/reports/daily/pdf')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r['Content-Type'], 'application/pdf')
        self.assertEqual(r.content[:4], b'%PDF')

    def test_manager_reports_forbidden_for_reception(self):
        for url in ('/api/reports/weekly', '/api/reports/monthly', '/api/reports/monthly/xlsx',
                    '/api/reports/financial', '/api/reports/staff', '/api/reports/locations'):
            self.assertEqual(self.client.get(url).status_code, 403, url)

    def test_weekly_and_monthly(self):
        self.login('boss')
        weekly = self.client.get('/api/reports/weekly').json()
        fees = {row['staff_name']: row['weekly_fees'] for row in weekly['staff_fees']}
        self.assertEqual(fees, {'Nok': '100.00', 'Ploy': '250.00'})

        monthly = self.client.get('/api/reports/monthly').json()
        self.assertEqual(monthly['net_profit'], '450.00')
        self.assertEqual(len(monthly['service_breakdown']), 2)
        self.assertEqual(self.client.get('/api/reports/monthly?month=13').status_code, 400)
        self.assertEqual(self.client.get('/api/reports/monthly?year=10000').status_code, 400)
        self.assertEqual(self.client.get('/api/reports/monthly/xlsx?year=10000').status_code, 400)

    def test_monthly_xlsx(self):
        self.login('boss')
        r = self.client.get('/api/reports/monthly/xlsx')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            r['Content-Type'],
            'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        self.assertIn('attachment; filename="monthly_report_', r['Content-Disposition'])
        self.assertEqual(r.content[:2], b'PK')
        self.assertTrue(AuditLog.objects.filter(action='EXPORT').exists())

    def test_financial_range(self):
        self.login('boss')
        body = self.client.get('/api/reports/financial').json()
        summary = body['summary']
        self.assertEqual(summary['total_transactions'], 2)
        self.assertEqual(summary['total_revenue'], '850.00')
        self.assertEqual(summary['average_transaction'], '425.00')
        self.assertEqual(summary['total_fees'], '350.00')
        self.assertEqual(summary['total_expenses'], '50.00')
        self.assertEqual(summary['total_costs'], '400.00')
        self.assertEqual(summary['net_profit'], '450.00')
        self.assertEqual(summary['profit_margin'], '52.9')
        self.assertEqual(body['date_range']['to'], timezone.localdate().isoformat())
        locations = {row['location']: row['revenue'] for row in body['location_breakdown']}
        self.assertEqual(locations, {'In-Shop': '250.00', 'Home Service': '600.00'})
        self.assertEqual(len(body['service_breakdown']), 2)

    def test_financial_filters(self):
        self.login('boss')
        body = self.client.get('/api/reports/financial?staff_name=Ploy&service_name=all').json()
        self.assertEqual(body['filters']['staff_name'], 'Ploy')
        self.assertIsNone(body['filters']['service_name'])
        self.assertEqual(body['summary']['total_transactions'], 1)
        self.assertEqual(body['summary']['net_profit'], '300.00')
        self.assertEqual(body['summary']['profit_margin'], '50.0')

        body = self.client.get('/api/reports/financial?location=In-Shop').json()
        self.assertEqual(body['summary']['total_revenue'], '250.00')

        today = timezone.localdate()
        empty = self.client.get(f'/api/reports/financial?from_date={today + timedelta(days=1)}'
                                f'&to_date={today + timedelta(days=2)}').json()
        self.assertEqual(empty['summary']['total_revenue'], '0.00')
        self.assertEqual(empty['summary']['average_transaction'], '0.00')
        self.assertEqual(empty['summary']['profit_margin'], '0.0')

    def test_financial_bad_range(self):
        self.login('boss')
        r = self.client.get('/api/reports/financial?from_date=2024-02-01&to_date=2024-01-01')
        self.assertEqual(r.status_code, 400)
        r = self.client.get('/api/reports/financial?from_date=yesterday')
        self.assertEqual(r.status_code, 400)

    def test_filter_lists(self):
        self.login('boss')
        self.assertEqual(self.client.get('/api/reports/staff').json(), ['Nok', 'Ploy'])
        self.assertEqual(self.client.get('/api/reports/service-types').json(),
                         ['Oil Massage', 'Thai Massage'])
        self.assertEqual(self.client.get('/api/reports/locations').json(),
                         ['Home Service', 'In-Shop'])


class StaffAdminApiTest(PosTestBase):
    """Staff master records and payouts (manager only)."""

    def test_reception_forbidden(self):
        self.login()
        self.assertEqual(self.client.get('/api/admin/staff').status_code, 403)
        self.assertEqual(len(self.client.get('/api/staff').json()), 2)

    def test_create_and_duplicate(self):
        self.login('boss')
        r = self.api('post', '/api/admin/staff', {'name': 'Fah', 'hire_date': '2024-01-15'})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.json()['payment_status'], Staff.PAYMENT_NEVER_PAID)
        self.assertEqual(self.api('post', '/api/admin/staff', {'name': 'Fah'}).status_code, 409)

    def test_payout_reduces_outstanding(self):
        self.login()
        self.sale()
        self.login('boss')

        r = self.api('post', f'/api/admin/staff/{self.nok.pk}/payments', {'amount': '60'})
        self.assertEqual(r.status_code, 201, r.content)
        self.assertEqual(r.json()['new_outstanding'], '40.00')
        self.assertEqual(r.json()['staff']['payment_status'], Staff.PAYMENT_PAID_THIS_WEEK)
        self.assertEqual(StaffPayment.objects.get().recorded_by, self.manager)

        history = self.client.get(f'/api/admin/staff/{self.nok.pk}/payments').json()
        self.assertEqual(history['payments'][0]['amount'], '60.00')

        balances = self.client.get('/api/admin/staff').json()
        self.assertEqual(balances['summary']['total_outstanding'], '40.00')

    def test_payout_period_order(self):
        self.login('boss')
        r = self.api('post', f'/api/admin/staff/{self.nok.pk}/payments', {
            'amount': '10', 'period_start': '2024-02-10', 'period_end': '2024-02-01',
        })
        self.assertEqual(r.status_code, 400)

    def test_remove_blocked_by_balance(self):
        self.login()
        self.sale()
        self.login('boss')
        self.assertEqual(self.api('delete', f'/api/admin/staff/{self.nok.pk}').status_code, 409)

        self.api('post', f'/api/admin/staff/{self.nok.pk}/payments', {'amount': '100'})
        self.assertEqual(self.api('delete', f'/api/admin/staff/{self.nok.pk}').status_code, 200)
        self.assertNotIn('Nok', [s['name'] for s in self.client.get('/api/staff').json()])

    def test_rename_blocked_by_history(self):
        self.login()
        self.sale()
        self.login('boss')
        r = self.api('put', f'/api/admin/staff/{self.nok.pk}', {'name': 'Nokky'})
        self.assertEqual(r.status_code, 409)
        r = self.api('put', f'/api/admin/staff/{self.ploy.pk}', {'name': 'Ploy P.'})
        self.assertEqual(r.json()['name'], 'Ploy P.')


class CatalogueApiTest(PosTestBase):
    """Services and payment methods."""

    def test_service_listing_and_price(self):
        self.login()
        self.assertEqual(len(self.client.get('/api/services').json()), 2)
        r = self.client.get('/api/services/price', {
            'name': 'Thai Massage', 'duration': 60, 'location': 'In-Shop',
        })
        self.assertEqual(r.json()['price'], '250.00')
        r = self.client.get('/api/services/price', {
            'name': 'Thai Massage', 'duration': 90, 'location': 'In-Shop',
        })
        self.assertEqual(r.status_code, 404)

    def test_service_changes_need_manager(self):
        self.login()
        payload = {'name': 'Foot Massage', 'duration_minutes': 30, 'location': 'In-Shop',
                   'price': '150', 'masseuse_fee': '60'}
        self.assertEqual(self.api('post', '/api/services', payload).status_code, 403)

        self.login('boss')
        self.assertEqual(self.api('post', '/api/services', payload).status_code, 201)
        self.assertEqual(self.api('post', '/api/services', payload).status_code, 409)

    def test_fee_cannot_exceed_price(self):
        self.login('boss')
        r = self.api('put', f'/api/services/{self.thai.pk}', {'masseuse_fee': '300'})
        self.assertEqual(r.status_code, 400)

    def test_price_change_keeps_history(self):
        self.login()
        self.sale()
        self.login('boss')
        self.api('put', f'/api/services/{self.thai.pk}', {'price': '300'})
        self.assertEqual(Transaction.objects.get().payment_amount, Decimal('250.00'))

    def test_payment_methods(self):
        self.login('boss')
        names = [m['name'] for m in self.client.get('/api/payment-methods').json()]
        self.assertNotIn('Crypto', names)
        self.assertEqual(self.api('post', '/api/payment-methods', {'name': 'cash'}).status_code, 409)
        r = self.api('post', '/api/payment-methods', {'name': 'QR PromptPay'})
        self.assertEqual(r.status_code, 201)
        self.assertEqual(self.api('delete', f"/api/payment-methods/{r.json()['id']}").status_code, 200)


class PageViewTest(PosTestBase):
    """HTML pages behind the gate."""

    def test_pages_render(self):
        self.login()
        RosterManager().add_to_roster(self.nok)
        r = self.client.get(reverse('pos:dashboard'))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, 'Nok')
        r = self.client.get(reverse('pos:roster'))
        self.assertEqual(r.status_code, 200)
        self.assertContains(r, 'Ploy')

    def test_reports_page_is_manager_only(self):
        self.login()
        self.assertEqual(self.client.get(reverse('pos:reports')).status_code, 403)
        self.login('boss')
        self.assertEqual(self.client.get(reverse('pos:reports')).status_code, 200)
