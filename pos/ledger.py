"""
Sales ledger – recording, correcting and voiding transactions, and staff
fee payouts.

Every write keeps three things in step inside one database transaction:
the transaction rows, the staff member's running fee totals and the
services_today counter on the roster.
"""
import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import Conflict, NotFound, ValidationFailed
from core.models import PaymentMethod, Service, Staff, StaffPayment, Transaction
from core.services.roster_manager import RosterManager
from core.utils.http import parse_int, parse_time, require_fields

logger = logging.getLogger('shop.pos')

TRANSACTION_FIELDS = (
    'staff_name', 'service_name', 'location', 'duration_minutes',
    'payment_method', 'start_time', 'end_time',
)


def _refresh_roster_counts(day, *staff_names):
    manager = RosterManager(day)
    for name in set(staff_names):
        manager.refresh_service_count(name)


def record_transaction(data, user=None):
    """
    Record a sale from a request payload.

    Price and masseuse fee come from the active Service matching
    (service_name, duration_minutes, location). With original_transaction_id
    the new row replaces that ACTIVE transaction: the original becomes EDITED
    and its fee is taken back from its staff member.
    """
    require_fields(data, *TRANSACTION_FIELDS)

    staff_name = str(data['staff_name']).strip()
    service_name = str(data['service_name']).strip()
    location = str(data['location']).strip()
    duration = parse_int(data['duration_minutes'], 'duration_minutes', minimum=1)
    method = str(data['payment_method']).strip()
    start_time = parse_time(data['start_time'], 'start_time')
    end_time = parse_time(data['end_time'], 'end_time')
    original_id = str(data.get('original_transaction_id') or '').strip()

    if not Staff.objects.filter(name=staff_name, active=True).exists():
        raise ValidationFailed(f'Unknown staff member: {staff_name}')
    if not PaymentMethod.objects.filter(name=method, active=True).exists():
        raise ValidationFailed(f'Unknown payment method: {method}')
    service = Service.lookup(service_name, duration, location)
    if service is None:
        raise ValidationFailed(f'Service not found: {service_name} ({duration} minutes, {location})')

    now = timezone.now()
    original = None
    with transaction.atomic():
        if original_id:
            original = (
                Transaction.objects.select_for_update()
                .filter(transaction_id=original_id).first()
            )
            if original is None:
                raise NotFound(f'Transaction not found: {original_id}')
            if original.status != Transaction.STATUS_ACTIVE:
                raise Conflict(f'Transaction {original_id} is {original.status} and cannot be corrected')
            original.status = Transaction.STATUS_EDITED
            original.save(update_fields=['status'])
            Staff.adjust_earnings(original.staff_name, -original.masseuse_fee)

        sale = Transaction.objects.create(
            transaction_id=Transaction.make_transaction_id(now),
            timestamp=now,
            date=timezone.localdate(now),
            staff_name=staff_name,
            service_name=service.name,
            location=service.location,
            duration_minutes=service.duration_minutes,
            payment_amount=service.price,
            payment_method=method,
            masseuse_fee=service.masseuse_fee,
            start_time=start_time,
            end_time=end_time,
            customer_contact=str(data.get('customer_contact') or '').strip()[:100],
            corrected_from=original_id,
            recorded_by=user,
        )
        Staff.adjust_earnings(staff_name, service.masseuse_fee)

        _refresh_roster_counts(sale.date, staff_name)
        if original is not None:
            _refresh_roster_counts(original.date, original.staff_name)

    if original is not None:
        logger.info('SALE_CORRECTED | tx=%s | replaces=%s | staff=%s | amount=%s',
                    sale.transaction_id, original_id, staff_name, sale.payment_amount)
    else:
        logger.info('SALE_RECORDED | tx=%s | staff=%s | service=%s | amount=%s | method=%s',
                    sale.transaction_id, staff_name, service.name, sale.payment_amount, method)
    return sale


def void_transaction(transaction_id):
    """ACTIVE -> VOID; the fee is taken back from the staff member."""
    with transaction.atomic():
        sale = (
            Transaction.objects.select_for_update()
            .filter(transaction_id=transaction_id).first()
        )
        if sale is None:
            raise NotFound(f'Transaction not found: {transaction_id}')
        if sale.status != Transaction.STATUS_ACTIVE:
            raise Conflict(f'Transaction {transaction_id} is {sale.status} and cannot be voided')
        sale.status = Transaction.STATUS_VOID
        sale.save(update_fields=['status'])
        Staff.adjust_earnings(sale.staff_name, -sale.masseuse_fee)
        _refresh_roster_counts(sale.date, sale.staff_name)

    logger.warning('SALE_VOIDED | tx=%s | staff=%s | amount=%s',
                   transaction_id, sale.staff_name, sale.payment_amount)
    return sale


def latest_for_correction():
    sale = Transaction.objects.filter(status=Transaction.STATUS_ACTIVE).order_by('-timestamp').first()
    if sale is None:
        raise NotFound('No recent transactions found to correct')
    return sale


def record_payout(staff, amount, payment_date, period_start=None, period_end=None, notes='', user=None):
    """Pay out fees to a staff member and move the amount to total_fees_paid."""
    if period_start and period_end and period_start > period_end:
        raise ValidationFailed('period_start must not be after period_end')

    with transaction.atomic():
        payment = StaffPayment.objects.create(
            staff=staff,
            amount=amount,
            payment_date=payment_date,
            period_start=period_start,
            period_end=period_end,
            notes=notes,
            recorded_by=user,
        )
        Staff.objects.filter(pk=staff.pk).update(
            total_fees_paid=F('total_fees_paid') + amount,
            last_payment_date=payment_date,
        )
    staff.refresh_from_db()

    logger.info('STAFF_PAYOUT | staff=%s | amount=%s | date=%s | outstanding=%s',
                staff.name, amount, payment_date, staff.outstanding_balance)
    return payment
