import core.models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('appointments', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Promotion',
            fields=[
                ('id', models.CharField(default=core.models.generate_object_id, editable=False, max_length=24, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Code')),
                ('description', models.CharField(blank=True, max_length=255, verbose_name='Description')),
                ('kind', models.CharField(choices=[('percentage', 'Percentage'), ('fixed', 'Fixed amount')], max_length=20, verbose_name='Discount Type')),
                ('value', models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(0)], verbose_name='Value')),
                ('max_discount', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name='Maximum Discount')),
                ('min_order_value', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True, verbose_name='Minimum Order Value')),
                ('start_date', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Start Date')),
                ('end_date', models.DateTimeField(blank=True, null=True, verbose_name='End Date')),
                ('category', models.CharField(choices=[('global', 'Global'), ('personal', 'Personal'), ('welcome', 'Welcome'), ('event', 'Event')], default='global', max_length=20, verbose_name='Category')),
                ('usage_limit', models.PositiveIntegerField(blank=True, null=True, verbose_name='Usage Limit')),
                ('usage_per_user', models.PositiveIntegerField(default=1, verbose_name='Usage Per User')),
                ('usage_count', models.PositiveIntegerField(default=0, verbose_name='Usage Count')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('target_clients', models.ManyToManyField(blank=True, related_name='targeted_promotions', to=settings.AUTH_USER_MODEL, verbose_name='Target Clients')),
            ],
            options={
                'verbose_name': 'Promotion',
                'verbose_name_plural': 'Promotions',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PromotionUsage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('used_at', models.DateTimeField(auto_now_add=True, verbose_name='Used At')),
                ('appointment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='promotion_usages', to='appointments.appointment', verbose_name='Appointment')),
                ('promotion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='usages', to='promotions.promotion', verbose_name='Promotion')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='promotion_usages', to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Promotion Usage',
                'verbose_name_plural': 'Promotion Usages',
                'ordering': ['-used_at'],
                'indexes': [models.Index(fields=['promotion', 'user'], name='promo_usage_user_idx')],
            },
        ),
    ]
