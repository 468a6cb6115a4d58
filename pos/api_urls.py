"""POS API URLs – all JSON endpoints under /api/."""
from django.urls import path

from .api import expenses, payment_methods, reports, roster, services, staff, transactions

app_name = 'pos_api'

urlpatterns = [
    # ── Staff roster ─────────────────────────────────────────────────────────
    path('staff/roster', roster.roster, name='roster'),
    path('staff/roster/serve-next', roster.serve_next, name='roster_serve_next'),
    path('staff/roster/<int:position>', roster.roster_position, name='roster_position'),
    path('staff/roster/<int:position>/move-up', roster.move_up, name='roster_move_up'),
    path('staff/roster/<int:position>/move-down', roster.move_down, name='roster_move_down'),
    path('staff/performance/today', reports.staff_performance_today, name='staff_performance_today'),
    path('staff', staff.staff_names, name='staff_names'),

    # ── Staff administration (manager) ──────────────────────────────────────
    path('admin/staff', staff.staff_collection, name='admin_staff'),
    path('admin/staff/<int:staff_id>', staff.staff_detail, name='admin_staff_detail'),
    path('admin/staff/<int:staff_id>/payments', staff.staff_payments, name='admin_staff_payments'),

    # ── Services & payment methods ──────────────────────────────────────────
    path('services', services.services, name='services'),
    path('services/price', services.service_price, name='service_price'),
    path('services/<int:service_id>', services.service_detail, name='service_detail'),
    path('payment-methods', payment_methods.payment_methods, name='payment_methods'),
    path('payment-methods/<int:method_id>', payment_methods.payment_method_detail, name='payment_method_detail'),

    # ── Transactions ────────────────────────────────────────────────────────
    path('transactions', transactions.transactions, name='transactions'),
    path('transactions/recent', transactions.recent_transactions, name='recent_transactions'),
    path('transactions/latest-for-correction', transactions.latest_for_correction, name='latest_for_correction'),
    path('transactions/summary/today', transactions.summary_today, name='transactions_summary_today'),
    path('transactions/<str:transaction_id>/void', transactions.void_transaction, name='void_transaction'),

    # ── Expenses ────────────────────────────────────────────────────────────
    path('expenses', expenses.expenses, name='expenses'),
    path('expenses/summary/today', expenses.summary_today, name='expenses_summary_today'),
    path('expenses/<int:expense_id>', expenses.expense_detail, name='expense_detail'),

    # ── Reports ─────────────────────────────────────────────────────────────
    path('reports/daily', reports.daily, name='report_daily'),
    path('reports/daily/pdf', reports.daily_pdf, name='report_daily_pdf'),
    path('reports/weekly', reports.weekly, name='report_weekly'),
    path('reports/monthly', reports.monthly, name='report_monthly'),
    path('reports/monthly/xlsx', reports.monthly_xlsx, name='report_monthly_xlsx'),
    path('reports/summary/today', reports.summary_today, name='report_summary_today'),
    path('reports/financial', reports.financial, name='report_financial'),
    path('reports/staff', reports.staff_filter, name='report_staff_filter'),
    path('reports/service-types', reports.service_type_filter, name='report_service_type_filter'),
    path('reports/locations', reports.location_filter, name='report_location_filter'),
]
