import core.models
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('chat', '0001_initial'),
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('id', models.CharField(default=core.models.generate_object_id, editable=False, max_length=24, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('status', models.PositiveSmallIntegerField(choices=[(1, 'On the way'), (2, 'Inspecting'), (3, 'Working'), (4, 'Handover'), (5, 'Awaiting payment'), (6, 'Completed'), (7, 'Cancelled')], default=1, verbose_name='Status')),
                ('agreed_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Agreed Price')),
                ('labor_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Labor Cost')),
                ('payment_method', models.CharField(blank=True, choices=[('qr', 'Bank transfer (QR)'), ('cash', 'Cash')], max_length=10, verbose_name='Payment Method')),
                ('promotion_code', models.CharField(blank=True, max_length=50, verbose_name='Promotion Code')),
                ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Promotion Discount')),
                ('final_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14, verbose_name='Final Amount')),
                ('before_work', models.JSONField(blank=True, default=dict, verbose_name='Before Work Evidence')),
                ('after_work', models.JSONField(blank=True, default=dict, verbose_name='After Work Evidence')),
                ('additional_issues', models.JSONField(blank=True, default=list, verbose_name='Additional Issues')),
                ('issues_approved', models.BooleanField(default=False, verbose_name='Additional Issues Approved')),
                ('note', models.TextField(blank=True, verbose_name='Note')),
                ('cancellation_reason', models.TextField(blank=True, verbose_name='Cancellation Reason')),
                ('settlement_ref', models.CharField(blank=True, max_length=64, verbose_name='Settlement Reference')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='client_appointments', to=settings.AUTH_USER_MODEL, verbose_name='Client')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='orders.order', verbose_name='Order')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='partner_appointments', to=settings.AUTH_USER_MODEL, verbose_name='Partner')),
                ('room', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='chat.chatroom', verbose_name='Chat Room')),
            ],
            options={
                'verbose_name': 'Appointment',
                'verbose_name_plural': 'Appointments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['partner', 'status'], name='appt_partner_status_idx'),
                    models.Index(fields=['client', 'status'], name='appt_client_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Review',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rating', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)], verbose_name='Rating')),
                ('comment', models.TextField(blank=True, verbose_name='Comment')),
                ('images', models.JSONField(blank=True, default=list, verbose_name='Images')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('appointment', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='review', to='appointments.appointment', verbose_name='Appointment')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews_written', to=settings.AUTH_USER_MODEL, verbose_name='Client')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews_received', to=settings.AUTH_USER_MODEL, verbose_name='Partner')),
            ],
            options={
                'verbose_name': 'Review',
                'verbose_name_plural': 'Reviews',
                'ordering': ['-created_at'],
            },
        ),
    ]
