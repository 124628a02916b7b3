import core.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('chat', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.CharField(default=core.models.generate_object_id, editable=False, max_length=24, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('service', models.CharField(max_length=150, verbose_name='Service')),
                ('category', models.CharField(choices=[('electricity', 'Electricity'), ('water', 'Water'), ('locksmith', 'Locksmith'), ('air_conditioning', 'Air Conditioning')], max_length=30, verbose_name='Service Category')),
                ('description', models.TextField(blank=True, verbose_name='Job Description')),
                ('images', models.JSONField(blank=True, default=list, verbose_name='Images')),
                ('scheduled_for', models.DateTimeField(verbose_name='Desired Time')),
                ('address', models.CharField(max_length=255, verbose_name='Address')),
                ('latitude', models.DecimalField(decimal_places=6, max_digits=9, verbose_name='Latitude')),
                ('longitude', models.DecimalField(decimal_places=6, max_digits=9, verbose_name='Longitude')),
                ('mode', models.CharField(choices=[('select', 'Open bidding'), ('assign', 'Direct assignment')], default='select', max_length=10, verbose_name='Bidding Mode')),
                ('price_range', models.CharField(blank=True, max_length=100, verbose_name='Price Range')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='Status')),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='orders', to=settings.AUTH_USER_MODEL, verbose_name='Client')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['category', 'status'], name='order_category_status_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('client',), name='one_pending_order_per_client')],
            },
        ),
        migrations.CreateModel(
            name='Applicant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Display Name')),
                ('avatar_url', models.URLField(blank=True, max_length=500, verbose_name='Avatar URL')),
                ('offered_price', models.DecimalField(decimal_places=2, max_digits=14, verbose_name='Offered Price')),
                ('note', models.TextField(blank=True, verbose_name='Note')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='applicants', to='orders.order', verbose_name='Order')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bids', to=settings.AUTH_USER_MODEL, verbose_name='Partner')),
                ('room', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='chat.chatroom', verbose_name='Chat Room')),
            ],
            options={
                'verbose_name': 'Applicant',
                'verbose_name_plural': 'Applicants',
                'ordering': ['created_at', 'id'],
                'constraints': [models.UniqueConstraint(fields=('order', 'partner'), name='one_bid_per_partner')],
            },
        ),
    ]
