from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='ShopUser',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('username', models.CharField(max_length=80, unique=True)),
                ('display_name', models.CharField(blank=True, default='', max_length=150)),
                ('role', models.CharField(choices=[('reception', 'Reception'), ('manager', 'Manager')], default='reception', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('is_staff', models.BooleanField(default=False)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'Shop User',
                'verbose_name_plural': 'Shop Users',
                'db_table': 'shop_users',
            },
        ),
        migrations.CreateModel(
            name='Staff',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True)),
                ('hire_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('total_fees_earned', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total_fees_paid', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('last_payment_date', models.DateField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Staff Member',
                'verbose_name_plural': 'Staff',
                'db_table': 'staff',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('duration_minutes', models.PositiveIntegerField()),
                ('location', models.CharField(choices=[('In-Shop', 'In-Shop'), ('Home Service', 'Home Service')], default='In-Shop', max_length=30)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10)),
                ('masseuse_fee', models.DecimalField(decimal_places=2, max_digits=10)),
            ],
            options={
                'db_table': 'services',
                'ordering': ['name', 'duration_minutes', 'location'],
                'constraints': [
                    models.UniqueConstraint(fields=('name', 'duration_minutes', 'location'), name='unique_service_name_duration_location'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PaymentMethod',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('active', models.BooleanField(db_index=True, default=True)),
                ('id', models.AutoField(primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=50, unique=True)),
                ('description', models.CharField(blank=True, default='', max_length=200)),
            ],
            options={
                'db_table': 'payment_methods',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Expense',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('date', models.DateField(db_index=True)),
                ('description', models.CharField(max_length=200)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='expenses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'expenses',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('transaction_id', models.CharField(max_length=32, unique=True)),
                ('timestamp', models.DateTimeField(db_index=True)),
                ('date', models.DateField(db_index=True)),
                ('staff_name', models.CharField(db_index=True, max_length=100)),
                ('service_name', models.CharField(max_length=100)),
                ('location', models.CharField(max_length=30)),
                ('duration_minutes', models.PositiveIntegerField()),
                ('payment_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('payment_method', models.CharField(max_length=50)),
                ('masseuse_fee', models.DecimalField(decimal_places=2, max_digits=10)),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('customer_contact', models.CharField(blank=True, default='', max_length=100)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('EDITED', 'Edited'), ('VOID', 'Void')], db_index=True, default='ACTIVE', max_length=10)),
                ('corrected_from', models.CharField(blank=True, default='', max_length=32)),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['date', 'status'], name='idx_tx_date_status'),
                    models.Index(fields=['staff_name', 'date'], name='idx_tx_staff_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StaffPayment',
            fields=[
                ('created_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when created', null=True)),
                ('updated_at', models.IntegerField(blank=True, default=None, help_text='UTC Unix timestamp when last updated', null=True)),
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('payment_date', models.DateField()),
                ('period_start', models.DateField(blank=True, null=True)),
                ('period_end', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('recorded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recorded_payments', to=settings.AUTH_USER_MODEL)),
                ('staff', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='core.staff')),
            ],
            options={
                'db_table': 'staff_payments',
                'ordering': ['-payment_date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='RosterEntry',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('roster_date', models.DateField(db_index=True)),
                ('position', models.PositiveIntegerField()),
                ('status', models.CharField(choices=[('Waiting', 'Waiting'), ('Serving', 'Serving'), ('Break', 'Break'), ('Finished', 'Finished'), ('NextUp', 'Next Up')], default='Waiting', max_length=20)),
                ('services_today', models.PositiveIntegerField(default=0)),
                ('last_updated', models.DateTimeField(auto_now=True)),
                ('staff', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='roster_entries', to='core.staff')),
            ],
            options={
                'db_table': 'staff_roster',
                'ordering': ['roster_date', 'position'],
                'constraints': [
                    models.UniqueConstraint(fields=('roster_date', 'staff'), name='unique_roster_date_staff'),
                ],
                'indexes': [
                    models.Index(fields=['roster_date', 'position'], name='idx_roster_date_position'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShopSession',
            fields=[
                ('key', models.CharField(max_length=64, primary_key=True, serialize=False)),
                ('role', models.CharField(max_length=20)),
                ('csrf_token', models.CharField(blank=True, default='', max_length=64)),
                ('created_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField(db_index=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, default='')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='shop_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Shop Session',
                'verbose_name_plural': 'Shop Sessions',
                'db_table': 'shop_sessions',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('username', models.CharField(blank=True, default='', max_length=80)),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('LOGIN', 'Login'), ('LOGOUT', 'Logout'), ('ROSTER', 'Roster Change'), ('SALE', 'Sale'), ('CORRECT', 'Sale Correction'), ('VOID', 'Void'), ('PAYOUT', 'Staff Payout'), ('EXPORT', 'Export')], max_length=20)),
                ('resource_type', models.CharField(max_length=50)),
                ('resource_id', models.CharField(blank=True, default='', max_length=64)),
                ('description', models.TextField(blank=True, default='')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('extra_data', models.JSONField(blank=True, null=True)),
                ('timestamp', models.IntegerField(db_index=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'action'], name='idx_audit_user_action'),
                    models.Index(fields=['resource_type', 'resource_id'], name='idx_audit_resource'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LoginAuditLog',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('username_attempted', models.CharField(max_length=150)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, default='')),
                ('timestamp', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('success', models.BooleanField(db_index=True, default=False)),
                ('user', models.ForeignKey(blank=True, help_text='Authenticated user (null for failed attempts)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='login_audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Login Audit Log',
                'verbose_name_plural': 'Login Audit Logs',
                'db_table': 'login_audit_logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['success', 'timestamp'], name='idx_login_audit_success_ts'),
                ],
            },
        ),
    ]
