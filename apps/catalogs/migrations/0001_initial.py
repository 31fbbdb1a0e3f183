# apps/catalogs/migrations/0001_initial.py
"""Supplier catalogs and distributor replicas."""
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DigitalCatalog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=255)),
                ('is_active', models.BooleanField(default=True)),
                ('owner', models.ForeignKey(help_text='User who publishes this catalog', on_delete=django.db.models.deletion.CASCADE, related_name='catalogs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [models.Index(fields=['owner', 'is_active'], name='catalog_owner_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='ReplicatedCatalog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('is_active', models.BooleanField(default=True)),
                ('distributor', models.ForeignKey(help_text='Distributor reselling from this copy', on_delete=django.db.models.deletion.CASCADE, related_name='replicated_catalogs', to=settings.AUTH_USER_MODEL)),
                ('original_catalog', models.ForeignKey(help_text='Supplier catalog this copy was made from', on_delete=django.db.models.deletion.CASCADE, related_name='replicas', to='catalogs.digitalcatalog')),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('original_catalog', 'distributor'), name='uniq_replica_per_distributor')],
            },
        ),
    ]
