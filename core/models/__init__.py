"""
Core models package – all massage shop domain models.
"""
from .mixins import TimestampMixin, ActiveFlagMixin
from .user import ShopUser
from .shop_session import ShopSession
from .staff import Staff, StaffPayment
from .roster import RosterDay, RosterEntry, RosterStatus
from .catalog import Service, PaymentMethod
from .sale import Transaction, Expense
from .audit import AuditLog
from .login_audit import LoginAuditLog

__all__ = [
    # Base
    'TimestampMixin', 'ActiveFlagMixin',
    # Accounts & sessions
    'ShopUser', 'ShopSession',
    # Staff
    'Staff', 'StaffPayment',
    # Roster
    'RosterDay', 'RosterEntry', 'RosterStatus',
    # Catalogue
    'Service', 'PaymentMethod',
    # Money
    'Transaction', 'Expense',
    # Audit
    'AuditLog',
    'LoginAuditLog',
]
