# apps/quotes/migrations/0001_initial.py
"""Quotes and quote items."""
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('catalogs', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Quote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer_name', models.CharField(max_length=255)),
                ('customer_email', models.EmailField(blank=True, max_length=254)),
                ('customer_company', models.CharField(blank=True, max_length=255)),
                ('customer_phone', models.CharField(blank=True, max_length=30)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('negotiating', 'Negotiating'), ('accepted', 'Accepted'), ('rejected', 'Rejected'), ('shipped', 'Shipped'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('delivery_method', models.CharField(choices=[('pickup', 'Pickup'), ('shipping', 'Shipping')], default='pickup', max_length=20)),
                ('catalog', models.ForeignKey(help_text='Catalog the quote was requested from', on_delete=django.db.models.deletion.PROTECT, related_name='quotes', to='catalogs.digitalcatalog')),
                ('customer_user', models.ForeignKey(blank=True, help_text='Requester account, when the requester is a registered user', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quotes_requested', to=settings.AUTH_USER_MODEL)),
                ('owner', models.ForeignKey(help_text='User who receives and answers the quote', on_delete=django.db.models.deletion.CASCADE, related_name='quotes_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner', 'status'], name='quote_owner_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='QuoteItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.UUIDField()),
                ('variant_id', models.UUIDField(blank=True, null=True)),
                ('product_name', models.CharField(max_length=255)),
                ('product_sku', models.CharField(blank=True, max_length=100, null=True)),
                ('variant_description', models.CharField(blank=True, max_length=255, null=True)),
                ('product_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.PositiveBigIntegerField(help_text='Minor currency units')),
                ('subtotal', models.PositiveBigIntegerField(help_text='quantity * unit_price')),
                ('price_type', models.CharField(choices=[('retail', 'Retail'), ('wholesale', 'Wholesale')], default='retail', max_length=20)),
                ('origin_replicated_catalog', models.ForeignKey(blank=True, help_text='Replicated catalog this item was sold through', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quote_items', to='catalogs.replicatedcatalog')),
                ('quote', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='quotes.quote')),
            ],
            options={
                'ordering': ['id'],
                'indexes': [models.Index(fields=['origin_replicated_catalog'], name='quoteitem_origin_idx')],
            },
        ),
    ]
