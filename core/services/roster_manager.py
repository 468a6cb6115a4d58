"""
Staff roster manager – the ordered queue of masseuses on duty for one day.

Positions always form 1..N after a mutation completes. Each mutation runs in
one transaction that first locks the day's RosterDay row and then the day's
entries, so concurrent adds, removals and reorders are serialized (an empty
day included) and a failed call leaves the roster exactly as it was. Input is
validated before anything is written.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count
from django.utils import timezone

from core.exceptions import Conflict, NotFound, ValidationFailed
from core.models import RosterDay, RosterEntry, RosterStatus, Staff, Transaction

logger = logging.getLogger('shop.roster')


class RosterManager:
    """Roster for a single roster_date (today unless told otherwise)."""

    def __init__(self, roster_date=None):
        self.roster_date = roster_date or timezone.localdate()

    # ── Reads ────────────────────────────────────────────────────────────

    def _queryset(self):
        return RosterEntry.objects.filter(roster_date=self.roster_date)

    def entries(self):
        """
        The day's roster in position order. services_today is recounted from
        ACTIVE transactions on the returned objects only; nothing is written.
        """
        entries = list(self._queryset().select_related('staff').order_by('position'))
        counts = dict(
            Transaction.objects
            .filter(date=self.roster_date, status=Transaction.STATUS_ACTIVE,
                    staff_name__in=[e.staff.name for e in entries])
            .order_by()
            .values('staff_name')
            .annotate(n=Count('id'))
            .values_list('staff_name', 'n')
        )
        for entry in entries:
            entry.services_today = counts.get(entry.staff.name, 0)
        return entries

    def size(self):
        return self._queryset().count()

    def check_contiguity(self):
        """True when positions are exactly 1..N with no gaps or duplicates."""
        positions = list(self._queryset().order_by('position').values_list('position', flat=True))
        return positions == list(range(1, len(positions) + 1))

    # ── Helpers ──────────────────────────────────────────────────────────

    def _locked_entries(self):
        """
        Lock the day, then return its rows in position order. Both locks are
        held until the surrounding transaction ends.
        """
        RosterDay.objects.get_or_create(roster_date=self.roster_date)
        RosterDay.objects.select_for_update().get(roster_date=self.roster_date)
        return list(
            self._queryset()
            .select_for_update()
            .select_related('staff')
            .order_by('position')
        )

    @staticmethod
    def _validate_position(position):
        if isinstance(position, bool) or not isinstance(position, int) or position < 1:
            raise ValidationFailed('Position must be a positive integer')

    def _entry_at(self, entries, position):
        self._validate_position(position)
        for entry in entries:
            if entry.position == position:
                return entry
        raise NotFound(f'No roster entry at position {position}')

    @staticmethod
    def _reindex(entries):
        """Write 1..N onto entries (already in the desired order)."""
        now = timezone.now()
        for index, entry in enumerate(entries, start=1):
            if entry.position != index:
                entry.position = index
                entry.last_updated = now
                RosterEntry.objects.filter(pk=entry.pk).update(position=index, last_updated=now)

    @staticmethod
    def resolve_staff(staff_ref):
        """Accept a Staff, a primary key or a name; only active staff qualify."""
        if isinstance(staff_ref, Staff):
            staff = staff_ref if staff_ref.active else None
        elif isinstance(staff_ref, int) and not isinstance(staff_ref, bool):
            staff = Staff.objects.filter(pk=staff_ref, active=True).first()
        elif isinstance(staff_ref, str) and staff_ref.strip():
            staff = Staff.objects.filter(name=staff_ref.strip(), active=True).first()
        else:
            raise ValidationFailed('staff_id or staff_name is required')
        if staff is None:
            raise NotFound(f'Staff member not found: {staff_ref}')
        return staff

    def _count_services(self, staff_name):
        return Transaction.objects.filter(
            staff_name=staff_name,
            date=self.roster_date,
            status=Transaction.STATUS_ACTIVE,
        ).count()

    # ── Mutations ────────────────────────────────────────────────────────

    def add_to_roster(self, staff_ref):
        """Append staff at position N+1 with status Waiting."""
        staff = self.resolve_staff(staff_ref)
        with transaction.atomic():
            entries = self._locked_entries()
            if any(e.staff_id == staff.pk for e in entries):
                raise Conflict(f'{staff.name} is already on the roster')
            try:
                with transaction.atomic():
                    entry = RosterEntry.objects.create(
                        roster_date=self.roster_date,
                        position=len(entries) + 1,
                        staff=staff,
                        status=RosterStatus.WAITING,
                        services_today=self._count_services(staff.name),
                    )
            except IntegrityError:
                raise Conflict(f'{staff.name} is already on the roster')
        logger.info('ROSTER_ADD | date=%s | staff=%s | position=%d',
                    self.roster_date, staff.name, entry.position)
        return entry

    def remove_from_roster(self, position):
        """Delete the entry at position; later entries move up by one."""
        with transaction.atomic():
            entries = self._locked_entries()
            target = self._entry_at(entries, position)
            target.delete()
            self._reindex([e for e in entries if e.pk != target.pk])
        logger.info('ROSTER_REMOVE | date=%s | staff=%s | position=%d',
                    self.roster_date, target.staff.name, position)

    def _swap(self, position, offset):
        with transaction.atomic():
            entries = self._locked_entries()
            target = self._entry_at(entries, position)
            neighbour_position = position + offset
            if neighbour_position < 1:
                raise Conflict('The first position cannot move up')
            if neighbour_position > len(entries):
                raise Conflict('The last position cannot move down')
            neighbour = self._entry_at(entries, neighbour_position)
            now = timezone.now()
            target.position, neighbour.position = neighbour.position, target.position
            target.last_updated = neighbour.last_updated = now
            RosterEntry.objects.filter(pk=target.pk).update(position=target.position, last_updated=now)
            RosterEntry.objects.filter(pk=neighbour.pk).update(position=neighbour.position, last_updated=now)
        logger.info('ROSTER_MOVE | date=%s | staff=%s | from=%d | to=%d',
                    self.roster_date, target.staff.name, position, target.position)
        return target

    def move_up(self, position):
        return self._swap(position, -1)

    def move_down(self, position):
        return self._swap(position, 1)

    def set_status(self, position, status):
        """Overwrite the status. Any status may follow any other."""
        if status not in RosterStatus.values:
            raise ValidationFailed(
                f"Invalid status '{status}'. Expected one of: {', '.join(RosterStatus.values)}"
            )
        with transaction.atomic():
            entry = self._entry_at(self._locked_entries(), position)
            previous = entry.status
            entry.status = status
            entry.save(update_fields=['status', 'last_updated'])
        logger.info('ROSTER_STATUS | date=%s | staff=%s | %s -> %s',
                    self.roster_date, entry.staff.name, previous, status)
        return entry

    def clear_roster(self):
        """Remove every entry for the day. Returns how many were removed."""
        with transaction.atomic():
            self._locked_entries()
            deleted, _ = self._queryset().delete()
        logger.warning('ROSTER_CLEAR | date=%s | removed=%d', self.roster_date, deleted)
        return deleted

    def serve_next(self):
        """
        Earliest Waiting entry becomes Serving and is returned.
        Returns None when nobody is Waiting; other entries are untouched.
        """
        with transaction.atomic():
            waiting = [e for e in self._locked_entries() if e.status == RosterStatus.WAITING]
            if not waiting:
                return None
            entry = waiting[0]
            entry.status = RosterStatus.SERVING
            entry.save(update_fields=['status', 'last_updated'])
        logger.info('ROSTER_SERVE | date=%s | staff=%s | position=%d',
                    self.roster_date, entry.staff.name, entry.position)
        return entry

    def refresh_service_count(self, staff_name):
        """Recount ACTIVE sales for staff_name on this roster date."""
        return self._queryset().filter(staff__name=staff_name).update(
            services_today=self._count_services(staff_name),
        )
