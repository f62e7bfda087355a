"""
Django management command to notify administrators about expiring inventory
"""
from datetime import timedelta
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q
from django.utils import timezone
from juice_inventory.core.models import Notification, Profile
from juice_inventory.core.utils import create_audit_log
from juice_inventory.inventory.models import InventoryRecord
from juice_inventory.inventory.utils import (
    bucket_expiring_records, build_expiration_message, get_inventory_setting,
    URGENCY_LEVELS, ATTENTION_DAYS,
)

User = get_user_model()


class Command(BaseCommand):
    help = 'Create expiration_warning notifications for every administrator about expiring inventory'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Alert window in days (default: EXPIRATION_WINDOW_DAYS setting)',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be sent without creating notifications',
        )

    def handle(self, *args, **options):
        window = options.get('days')
        if window is None:
            window = get_inventory_setting('EXPIRATION_WINDOW_DAYS', ATTENTION_DAYS)
        if window < 0:
            raise CommandError('--days must not be negative')
        dry_run = options.get('dry_run', False)

        today = timezone.localdate()
        candidates = InventoryRecord.objects.select_related('product', 'location').filter(
            expiration_date__lte=today + timedelta(days=window)
        )
        items, counts = bucket_expiring_records(candidates, today=today, window_days=window)

        admins = list(
            User.objects.filter(is_active=True)
            .filter(Q(profile__role=Profile.ROLE_ADMIN) | Q(is_superuser=True, profile__isnull=True))
            .distinct()
        )

        self.stdout.write(f"Expiring items within {window} days: {len(items)}")
        for level in URGENCY_LEVELS:
            self.stdout.write(f"  {level}: {counts[level]}")
        self.stdout.write(f"Administrators: {len(admins)}")

        if not items or not admins:
            self.stdout.write(self.style.WARNING('Nothing to send'))
            return

        created = 0
        skipped = 0
        for record, days, urgency in items:
            message = build_expiration_message(record, days)
            for admin in admins:
                # Skip alerts the admin already has unread
                if Notification.objects.filter(user=admin, message=message, read=False).exists():
                    skipped += 1
                    continue
                if dry_run:
                    self.stdout.write(f"[dry-run] {admin.username}: {message} [{urgency}]")
                    created += 1
                    continue
                Notification.objects.create(
                    user=admin,
                    title='Expiration Alert',
                    message=message,
                    type='expiration_warning',
                    read=False,
                )
                created += 1

        if dry_run:
            self.stdout.write(self.style.SUCCESS(f"Would create {created} notifications ({skipped} already pending)"))
            return

        create_audit_log(
            action='expiration_notify',
            model_name='InventoryRecord',
            object_id='bulk',
            object_name='check_expirations',
            changes={'window_days': window, 'created': created, 'skipped': skipped, 'counts': counts},
        )
        self.stdout.write(self.style.SUCCESS(f"Created {created} notifications ({skipped} already pending)"))
