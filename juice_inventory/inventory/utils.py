"""
Expiration helpers shared by the expiring-items view, the notify endpoint
and the check_expirations command.
"""
from django.conf import settings
from django.utils import timezone

EXPIRED = 'expired'
CRITICAL = 'critical'
WARNING = 'warning'
ATTENTION = 'attention'
URGENCY_LEVELS = [EXPIRED, CRITICAL, WARNING, ATTENTION]

CRITICAL_DAYS = 7
WARNING_DAYS = 14
ATTENTION_DAYS = 30


def get_inventory_setting(name, default):
    return getattr(settings, 'JUICE_INVENTORY', {}).get(name, default)


def days_until_expiration(expiration_date, today=None):
    """Whole days from today to the expiration date; negative once expired"""
    if today is None:
        today = timezone.localdate()
    return (expiration_date - today).days


def expiration_urgency(days):
    if days < 0:
        return EXPIRED
    if days <= CRITICAL_DAYS:
        return CRITICAL
    if days <= WARNING_DAYS:
        return WARNING
    return ATTENTION


def bucket_expiring_records(records, today=None, window_days=None):
    """
    Split records into urgency buckets.

    Returns a list of (record, days, urgency) tuples sorted by days ascending,
    keeping only records expiring within ``window_days``, and a dict of
    per-bucket counts.
    """
    if today is None:
        today = timezone.localdate()
    if window_days is None:
        window_days = get_inventory_setting('EXPIRATION_WINDOW_DAYS', ATTENTION_DAYS)

    items = []
    counts = {level: 0 for level in URGENCY_LEVELS}
    for record in records:
        days = days_until_expiration(record.expiration_date, today)
        if days > window_days:
            continue
        urgency = expiration_urgency(days)
        counts[urgency] += 1
        items.append((record, days, urgency))

    items.sort(key=lambda item: (item[1], item[0].pk or 0))
    return items, counts


def build_expiration_message(record, days):
    return (
        f"{record.product.name} at {record.location.name} expires in {days} days "
        f"({record.quantity} units)"
    )
