# apps/consolidation/migrations/0001_initial.py
"""Consolidated orders, their items and order history."""
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('catalogs', '0001_initial'),
        ('quotes', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ConsolidatedOrder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('distributor', models.ForeignKey(help_text='Distributor who owns and edits this order', on_delete=django.db.models.deletion.CASCADE, related_name='consolidated_orders', to=settings.AUTH_USER_MODEL)),
                ('linked_quote', models.OneToOneField(blank=True, help_text='Outbound quote created when the order was sent', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='consolidated_order', to='quotes.quote')),
                ('source_catalog', models.ForeignKey(help_text='Supplier catalog the outbound quote is raised against', on_delete=django.db.models.deletion.PROTECT, related_name='consolidated_orders', to='catalogs.digitalcatalog')),
                ('source_replicated_catalog', models.ForeignKey(help_text='Distributor copy whose accepted quotes feed this order', on_delete=django.db.models.deletion.PROTECT, related_name='consolidated_orders', to='catalogs.replicatedcatalog')),
                ('supplier', models.ForeignKey(help_text='Supplier the order will be sent to', on_delete=django.db.models.deletion.CASCADE, related_name='consolidated_orders_received', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['distributor', 'status'], name='consol_distributor_status_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('status', 'draft')), fields=('distributor', 'supplier'), name='uniq_open_draft_per_supplier')],
            },
        ),
        migrations.CreateModel(
            name='ConsolidatedOrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product_id', models.UUIDField()),
                ('variant_id', models.UUIDField(blank=True, null=True)),
                ('product_name', models.CharField(max_length=255)),
                ('product_sku', models.CharField(blank=True, max_length=100, null=True)),
                ('variant_description', models.CharField(blank=True, max_length=255, null=True)),
                ('product_image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('quantity', models.PositiveIntegerField()),
                ('unit_price', models.PositiveBigIntegerField(help_text='Minor currency units')),
                ('subtotal', models.PositiveBigIntegerField(editable=False)),
                ('source_quote_ids', models.JSONField(blank=True, default=list, help_text='Accepted quotes that contributed to this bucket')),
                ('consolidated_order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='consolidation.consolidatedorder')),
            ],
            options={
                'ordering': ['id'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('variant_id__isnull', True)), fields=('consolidated_order', 'product_id'), name='uniq_consol_item_no_variant'),
                    models.UniqueConstraint(condition=models.Q(('variant_id__isnull', False)), fields=('consolidated_order', 'product_id', 'variant_id'), name='uniq_consol_item_variant'),
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='consol_item_quantity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricalConsolidatedOrder',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('sent', 'Sent'), ('cancelled', 'Cancelled')], default='draft', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('distributor', models.ForeignKey(blank=True, db_constraint=False, help_text='Distributor who owns and edits this order', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('linked_quote', models.ForeignKey(blank=True, db_constraint=False, help_text='Outbound quote created when the order was sent', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='quotes.quote')),
                ('source_catalog', models.ForeignKey(blank=True, db_constraint=False, help_text='Supplier catalog the outbound quote is raised against', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalogs.digitalcatalog')),
                ('source_replicated_catalog', models.ForeignKey(blank=True, db_constraint=False, help_text='Distributor copy whose accepted quotes feed this order', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalogs.replicatedcatalog')),
                ('supplier', models.ForeignKey(blank=True, db_constraint=False, help_text='Supplier the order will be sent to', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical consolidated order',
                'verbose_name_plural': 'historical consolidated orders',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
