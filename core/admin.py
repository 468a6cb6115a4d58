"""
Django admin registration for all core models.
"""
import logging

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    ShopUser, ShopSession, Staff, StaffPayment, RosterEntry,
    Service, PaymentMethod, Transaction, Expense, AuditLog, LoginAuditLog,
)

audit_logger = logging.getLogger('shop.audit')

# Customize Django admin site labels
admin.site.site_header = "Massage Shop Administration"
admin.site.site_title = "Massage Shop Administration"
admin.site.index_title = "Massage Shop Administration"


# ── Shop Sessions ────────────────────────────────────────────────
@admin.action(description='End selected sessions')
def end_sessions(modeladmin, request, queryset):
    """Delete the selected ShopSession rows; their cookies stop working at once."""
    labels = [f'{s.user.username}:{s.key[:8]}' for s in queryset.select_related('user')]
    queryset.delete()
    audit_logger.warning(
        'ADMIN: ended %d session(s) for [%s] by %s',
        len(labels), ', '.join(labels), request.user.username
    )


@admin.register(ShopSession)
class ShopSessionAdmin(admin.ModelAdmin):
    list_display = ('user', 'short_key', 'role', 'ip_address', 'created_at', 'expires_at', 'session_status')
    list_filter = ('role', 'created_at')
    search_fields = ('user__username', 'ip_address')
    readonly_fields = ('key', 'user', 'role', 'created_at', 'expires_at',
                       'ip_address', 'user_agent')
    exclude = ('csrf_token',)
    actions = [end_sessions]
    ordering = ('-created_at',)

    @admin.display(description='Session')
    def short_key(self, obj):
        return f'{obj.key[:8]}…'

    @admin.display(description='Session alive?')
    def session_status(self, obj):
        return '✅ Active' if not obj.is_expired() else '❌ Expired'

    def has_add_permission(self, request):
        return False  # Sessions are created by the login flow only

    def has_change_permission(self, request, obj=None):
        return False


# ── Shop Users ───────────────────────────────────────────────────
@admin.register(ShopUser)
class ShopUserAdmin(BaseUserAdmin):
    list_display = ('username', 'display_name', 'role', 'is_active', 'is_staff', 'last_login')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'display_name')
    ordering = ('username',)

    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ('Personal Info', {'fields': ('display_name',)}),
        ('Role & Permissions', {'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'display_name', 'role', 'password1', 'password2'),
        }),
    )


# ── Staff ────────────────────────────────────────────────────────
class StaffPaymentInline(admin.TabularInline):
    model = StaffPayment
    extra = 0
    fields = ('payment_date', 'amount', 'period_start', 'period_end', 'notes', 'recorded_by')
    readonly_fields = ('recorded_by',)


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('name', 'active', 'hire_date', 'total_fees_earned', 'total_fees_paid',
                    'outstanding', 'last_payment_date')
    list_filter = ('active',)
    search_fields = ('name',)
    inlines = [StaffPaymentInline]

    @admin.display(description='Outstanding')
    def outstanding(self, obj):
        return obj.outstanding_balance


@admin.register(StaffPayment)
class StaffPaymentAdmin(admin.ModelAdmin):
    list_display = ('staff', 'amount', 'payment_date', 'period_start', 'period_end', 'recorded_by')
    list_filter = ('payment_date',)
    search_fields = ('staff__name',)


@admin.register(RosterEntry)
class RosterEntryAdmin(admin.ModelAdmin):
    """Read-only: positions are owned by the roster manager."""
    list_display = ('roster_date', 'position', 'staff', 'status', 'services_today', 'last_updated')
    list_filter = ('roster_date', 'status')
    ordering = ('-roster_date', 'position')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# ── Catalogue ────────────────────────────────────────────────────
@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('name', 'duration_minutes', 'location', 'price', 'masseuse_fee', 'active')
    list_filter = ('location', 'active')
    search_fields = ('name',)


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ('name', 'description', 'active')
    list_filter = ('active',)


# ── Money ────────────────────────────────────────────────────────
@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Sales are corrected through the POS, never edited in place."""
    list_display = ('transaction_id', 'date', 'staff_name', 'service_name', 'payment_amount',
                    'payment_method', 'masseuse_fee', 'status')
    list_filter = ('status', 'date', 'payment_method')
    search_fields = ('transaction_id', 'staff_name', 'customer_contact')
    date_hierarchy = 'date'
    list_per_page = 50

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ('date', 'description', 'amount', 'recorded_by')
    list_filter = ('date',)
    search_fields = ('description',)


# ── Audit Log ───────────────────────────────────────────────────
@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'username', 'action', 'resource_type', 'resource_id', 'ip_address')
    list_filter = ('action', 'resource_type')
    search_fields = ('username', 'description', 'resource_id')
    readonly_fields = ('id', 'user', 'username', 'action', 'resource_type', 'resource_id',
                       'description', 'ip_address', 'extra_data', 'timestamp')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# ── Login Audit Log ─────────────────────────────────────────────
@admin.register(LoginAuditLog)
class LoginAuditLogAdmin(admin.ModelAdmin):
    """Read-only, non-deletable audit trail for login attempts."""
    list_display = ('timestamp', 'username_attempted', 'success', 'ip_address', 'user_agent_short')
    list_filter = ('success', 'timestamp')
    search_fields = ('username_attempted', 'ip_address')
    readonly_fields = (
        'id', 'user', 'username_attempted', 'ip_address',
        'user_agent', 'timestamp', 'success',
    )
    date_hierarchy = 'timestamp'
    list_per_page = 50

    @admin.display(description='User Agent')
    def user_agent_short(self, obj):
        ua = obj.user_agent or ''
        return (ua[:80] + '…') if len(ua) > 80 else ua

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
