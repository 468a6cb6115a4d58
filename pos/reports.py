"""
Report builders – plain dicts, shared by the JSON endpoints and the xlsx export.

Only ACTIVE transactions count towards any total; EDITED rows have been
replaced by their correction and VOID rows never happened.
"""
import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from io import BytesIO

from django.db.models import Count, Sum
from django.utils import timezone

from core.models import Expense, Service, Staff, Transaction

CENT = Decimal('0.01')


def as_money(value):
    """Decimal (or None) -> '1234.50'."""
    return str((Decimal(value) if value is not None else Decimal('0')).quantize(CENT))


def _active(start, end=None):
    qs = Transaction.objects.filter(status=Transaction.STATUS_ACTIVE)
    if end is None:
        return qs.filter(date=start)
    return qs.filter(date__gte=start, date__lte=end)


def _totals(qs):
    agg = qs.aggregate(
        transaction_count=Count('id'),
        total_revenue=Sum('payment_amount'),
        total_fees=Sum('masseuse_fee'),
    )
    return {
        'transaction_count': agg['transaction_count'],
        'total_revenue': agg['total_revenue'] or Decimal('0'),
        'total_fees': agg['total_fees'] or Decimal('0'),
    }


def _expense_totals(qs):
    agg = qs.aggregate(expense_count=Count('id'), total_expenses=Sum('amount'))
    return {
        'expense_count': agg['expense_count'],
        'total_expenses': agg['total_expenses'] or Decimal('0'),
    }


def _payment_breakdown(qs):
    rows = (
        qs.order_by().values('payment_method')
        .annotate(count=Count('id'), revenue=Sum('payment_amount'))
        .order_by('-revenue', 'payment_method')
    )
    return [
        {'payment_method': r['payment_method'], 'count': r['count'], 'revenue': as_money(r['revenue'])}
        for r in rows
    ]


def staff_performance(qs):
    rows = (
        qs.order_by().values('staff_name')
        .annotate(
            massage_count=Count('id'),
            total_fees=Sum('masseuse_fee'),
            total_revenue=Sum('payment_amount'),
        )
        .order_by('-total_fees', 'staff_name')
    )
    return [
        {
            'staff_name': r['staff_name'],
            'massage_count': r['massage_count'],
            'total_fees': as_money(r['total_fees']),
            'total_revenue': as_money(r['total_revenue']),
        }
        for r in rows
    ]


def performance_for(day=None):
    """Per-staff counts, fees and revenue for one day."""
    return staff_performance(_active(day or timezone.localdate()))


def _money_dict(values):
    return {k: as_money(v) if isinstance(v, Decimal) else v for k, v in values.items()}


def today_summary(day=None):
    day = day or timezone.localdate()
    qs = _active(day)
    summary = _money_dict(_totals(qs))
    summary['date'] = day.isoformat()
    summary['payment_breakdown'] = _payment_breakdown(qs)
    return summary


def daily_report(day=None):
    """Totals, expenses, breakdowns and net profit (revenue − fees − expenses)."""
    day = day or timezone.localdate()
    qs = _active(day)
    totals = _totals(qs)
    expenses = _expense_totals(Expense.objects.filter(date=day))
    net_profit = totals['total_revenue'] - totals['total_fees'] - expenses['total_expenses']
    return {
        'date': day.isoformat(),
        'transaction_summary': _money_dict(totals),
        'expense_summary': _money_dict(expenses),
        'payment_breakdown': _payment_breakdown(qs),
        'staff_performance': staff_performance(qs),
        'net_profit': as_money(net_profit),
    }


def week_bounds(day):
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=6)


def weekly_report(day=None):
    """Monday–Sunday fees per staff member, for the weekly payout."""
    week_start, week_end = week_bounds(day or timezone.localdate())
    rows = (
        _active(week_start, week_end).order_by().values('staff_name')
        .annotate(weekly_massages=Count('id'), weekly_fees=Sum('masseuse_fee'))
        .order_by('-weekly_fees', 'staff_name')
    )
    return {
        'week_start': week_start.isoformat(),
        'week_end': week_end.isoformat(),
        'staff_fees': [
            {
                'staff_name': r['staff_name'],
                'weekly_massages': r['weekly_massages'],
                'weekly_fees': as_money(r['weekly_fees']),
            }
            for r in rows
        ],
    }


def monthly_report(year, month):
    month_start = date(year, month, 1)
    month_end = date(year, month, calendar.monthrange(year, month)[1])
    qs = _active(month_start, month_end)
    totals = _totals(qs)
    expenses = _expense_totals(Expense.objects.filter(date__gte=month_start, date__lte=month_end))
    services = (
        qs.order_by().values('service_name')
        .annotate(count=Count('id'), revenue=Sum('payment_amount'))
        .order_by('-revenue', 'service_name')
    )
    return {
        'month': f'{year:04d}-{month:02d}',
        'month_start': month_start.isoformat(),
        'month_end': month_end.isoformat(),
        'monthly_totals': _money_dict(totals),
        'monthly_expenses': _money_dict(expenses),
        'service_breakdown': [
            {'service_name': r['service_name'], 'count': r['count'], 'revenue': as_money(r['revenue'])}
            for r in services
        ],
        'staff_performance': staff_performance(qs),
        'net_profit': as_money(totals['total_revenue'] - totals['total_fees'] - expenses['total_expenses']),
    }


def _breakdown(qs, field):
    rows = (
        qs.order_by().values(field)
        .annotate(count=Count('id'), revenue=Sum('payment_amount'))
        .order_by('-revenue', field)
    )
    return [{field: r[field], 'count': r['count'], 'revenue': as_money(r['revenue'])} for r in rows]


def financial_report(start, end, staff=None, service=None, location=None):
    """
    Date-range totals for the manager's dashboard, optionally narrowed to one
    staff member, service or location. Expenses are not tied to a sale, so
    they follow the date range only.
    """
    qs = _active(start, end)
    if staff:
        qs = qs.filter(staff_name=staff)
    if service:
        qs = qs.filter(service_name=service)
    if location:
        qs = qs.filter(location=location)

    totals = _totals(qs)
    expenses = _expense_totals(Expense.objects.filter(date__gte=start, date__lte=end))
    revenue = totals['total_revenue']
    net_profit = revenue - totals['total_fees'] - expenses['total_expenses']
    count = totals['transaction_count']

    return {
        'date_range': {'from': start.isoformat(), 'to': end.isoformat()},
        'filters': {'staff_name': staff, 'service_name': service, 'location': location},
        'summary': {
            'total_transactions': count,
            'total_revenue': as_money(revenue),
            'average_transaction': as_money(revenue / count if count else None),
            'total_fees': as_money(totals['total_fees']),
            'total_expenses': as_money(expenses['total_expenses']),
            'total_costs': as_money(totals['total_fees'] + expenses['total_expenses']),
            'net_profit': as_money(net_profit),
            'profit_margin': str((net_profit * 100 / revenue).quantize(Decimal('0.1'))) if revenue else '0.0',
        },
        'payment_breakdown': _payment_breakdown(qs),
        'location_breakdown': _breakdown(qs, 'location'),
        'service_breakdown': _breakdown(qs, 'service_name'),
        'staff_performance': staff_performance(qs),
        'expense_summary': _money_dict(expenses),
    }


FILTER_SOURCES = {
    'staff': (Transaction, 'staff_name'),
    'service_types': (Transaction, 'service_name'),
    'locations': (Service, 'location'),
}


def filter_values(kind):
    """Sorted distinct values the financial report can be narrowed by."""
    model, field = FILTER_SOURCES[kind]
    return list(
        model.objects.exclude(**{field: ''})
        .order_by(field).values_list(field, flat=True).distinct()
    )


def staff_balances(today=None):
    """Active staff with outstanding balance and payout status, largest debt first."""
    today = today or timezone.localdate()
    week_start, _ = week_bounds(today)
    staff = list(Staff.objects.filter(active=True))

    week_fees = dict(
        _active(week_start, today).order_by().values('staff_name')
        .annotate(fees=Sum('masseuse_fee')).values_list('staff_name', 'fees')
    )
    today_counts = dict(
        _active(today).order_by().values('staff_name')
        .annotate(n=Count('id')).values_list('staff_name', 'n')
    )

    rows = []
    for s in staff:
        rows.append({
            'id': s.id,
            'name': s.name,
            'hire_date': s.hire_date.isoformat() if s.hire_date else None,
            'notes': s.notes,
            'total_fees_earned': as_money(s.total_fees_earned),
            'total_fees_paid': as_money(s.total_fees_paid),
            'outstanding_balance': as_money(s.outstanding_balance),
            'last_payment_date': s.last_payment_date.isoformat() if s.last_payment_date else None,
            'payment_status': s.payment_status(today),
            'today_transactions': today_counts.get(s.name, 0),
            'this_week_fees': as_money(week_fees.get(s.name)),
        })
    rows.sort(key=lambda r: Decimal(r['outstanding_balance']), reverse=True)

    summary = {
        'total_outstanding': as_money(sum((s.outstanding_balance for s in staff), Decimal('0'))),
        'overdue_count': sum(1 for r in rows if r['payment_status'] == Staff.PAYMENT_OVERDUE),
        'payment_due_count': sum(1 for r in rows if r['payment_status'] == Staff.PAYMENT_DUE),
        'total_this_week_fees': as_money(sum((Decimal(r['this_week_fees']) for r in rows), Decimal('0'))),
    }
    return rows, summary


def monthly_workbook(report, currency):
    """Render a monthly_report() dict as an .xlsx file; returns the bytes."""
    from openpyxl import Workbook
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    wb = Workbook()
    ws = wb.active
    ws.title = 'Summary'

    header_fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF', size=11)
    header_alignment = Alignment(horizontal='center', vertical='center')

    def header_row(sheet, row, labels):
        for col_num, label in enumerate(labels, 1):
            cell = sheet.cell(row=row, column=col_num)
            cell.value = label
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = header_alignment

    ws.merge_cells('A1:D1')
    ws['A1'] = f"Monthly Report {report['month']}"
    ws['A1'].font = Font(bold=True, size=14)
    ws['A1'].alignment = Alignment(horizontal='center')
    ws.merge_cells('A2:D2')
    ws['A2'] = f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
    ws['A2'].alignment = Alignment(horizontal='center')

    totals = report['monthly_totals']
    expenses = report['monthly_expenses']
    header_row(ws, 4, ['Item', f'Amount ({currency})'])
    summary_rows = [
        ('Transactions', totals['transaction_count']),
        ('Revenue', Decimal(totals['total_revenue'])),
        ('Staff fees', Decimal(totals['total_fees'])),
        ('Expenses', Decimal(expenses['total_expenses'])),
        ('Net profit', Decimal(report['net_profit'])),
    ]
    for row_num, (label, value) in enumerate(summary_rows, 5):
        ws.cell(row=row_num, column=1, value=label)
        ws.cell(row=row_num, column=2, value=value)
    ws.cell(row=5 + len(summary_rows) - 1, column=1).font = Font(bold=True)

    services = wb.create_sheet('Services')
    header_row(services, 1, ['Service', 'Count', f'Revenue ({currency})'])
    for row_num, r in enumerate(report['service_breakdown'], 2):
        services.cell(row=row_num, column=1, value=r['service_name'])
        services.cell(row=row_num, column=2, value=r['count'])
        services.cell(row=row_num, column=3, value=Decimal(r['revenue']))

    staff = wb.create_sheet('Staff')
    header_row(staff, 1, ['Staff', 'Massages', f'Fees ({currency})', f'Revenue ({currency})'])
    for row_num, r in enumerate(report['staff_performance'], 2):
        staff.cell(row=row_num, column=1, value=r['staff_name'])
        staff.cell(row=row_num, column=2, value=r['massage_count'])
        staff.cell(row=row_num, column=3, value=Decimal(r['total_fees']))
        staff.cell(row=row_num, column=4, value=Decimal(r['total_revenue']))

    for sheet in wb.worksheets:
        for col_idx, col in enumerate(sheet.columns, 1):
            max_len = max((len(str(c.value)) for c in col if c.value is not None), default=0)
            sheet.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, 40)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def daily_pdf(report, currency):
    """Render a daily_report() dict as a one-page A4 PDF; returns the bytes."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.units import inch
    from reportlab.lib.enums import TA_CENTER
    from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4,
                            leftMargin=0.6 * inch, rightMargin=0.6 * inch,
                            topMargin=0.6 * inch, bottomMargin=0.6 * inch)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle', parent=styles['Heading1'],
        fontSize=14, alignment=TA_CENTER, spaceAfter=15,
    )
    table_style = TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2C3E50')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ])

    def table(rows, widths):
        t = Table(rows, colWidths=[w * inch for w in widths])
        t.setStyle(table_style)
        return t

    totals = report['transaction_summary']
    elements = [
        Paragraph(f"Daily Report - {report['date']}", title_style),
        table([
            ['Item', f'Amount ({currency})'],
            ['Transactions', totals['transaction_count']],
            ['Revenue', totals['total_revenue']],
            ['Staff fees', totals['total_fees']],
            ['Expenses', report['expense_summary']['total_expenses']],
            ['Net profit', report['net_profit']],
        ], [3.5, 2.5]),
        Spacer(1, 0.25 * inch),
        table(
            [['Payment method', 'Count', f'Revenue ({currency})']]
            + [[r['payment_method'], r['count'], r['revenue']] for r in report['payment_breakdown']],
            [3, 1.2, 2],
        ),
        Spacer(1, 0.25 * inch),
        table(
            [['Staff', 'Massages', f'Fees ({currency})', f'Revenue ({currency})']]
            + [[r['staff_name'], r['massage_count'], r['total_fees'], r['total_revenue']]
               for r in report['staff_performance']],
            [2.4, 1.1, 1.6, 1.6],
        ),
    ]
    doc.build(elements)
    return buffer.getvalue()
