"""
RosterEntry model – one staff member on duty for one day.
"""
from django.db import models


class RosterStatus(models.TextChoices):
    """Closed set of on-duty states. Any state may move to any other."""

    WAITING = 'Waiting', 'Waiting'
    SERVING = 'Serving', 'Serving'
    BREAK = 'Break', 'Break'
    FINISHED = 'Finished', 'Finished'
    NEXT_UP = 'NextUp', 'Next Up'


class RosterEntry(models.Model):
    """
    Position in the day's queue.

    Positions are kept contiguous (1..N) by core.services.roster_manager;
    the table only guarantees that a staff member appears once per day.
    """

    id = models.BigAutoField(primary_key=True)
    roster_date = models.DateField(db_index=True)
    position = models.PositiveIntegerField()
    staff = models.ForeignKey(
        'core.Staff', on_delete=models.PROTECT, related_name='roster_entries'
    )
    status = models.CharField(
        max_length=20, choices=RosterStatus.choices, default=RosterStatus.WAITING
    )
    services_today = models.PositiveIntegerField(default=0)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staff_roster'
        ordering = ['roster_date', 'position']
        constraints = [
            models.UniqueConstraint(
                fields=['roster_date', 'staff'],
                name='unique_roster_date_staff'
            ),
        ]
        indexes = [
            models.Index(fields=['roster_date', 'position'], name='idx_roster_date_position'),
        ]

    def __str__(self):
        return f'{self.roster_date} #{self.position} {self.staff_id} ({self.status})'


class RosterDay(models.Model):
    """
    One row per roster_date, locked by every roster mutation.

    Entry rows can only be locked once they exist, so an empty day or a
    concurrent append would otherwise go unserialized.
    """

    roster_date = models.DateField(primary_key=True)

    class Meta:
        db_table = 'staff_roster_days'
        ordering = ['-roster_date']

    def __str__(self):
        return str(self.roster_date)
