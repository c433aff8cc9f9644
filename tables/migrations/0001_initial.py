"""
Initial migration for the tables app.
"""

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='DiningTable',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('table_number', models.CharField(max_length=20, unique=True, verbose_name='Table Number')),
                ('seating_capacity', models.PositiveIntegerField(default=4, verbose_name='Seating Capacity')),
                ('location', models.CharField(blank=True, max_length=100, null=True, verbose_name='Location')),
                ('is_occupied', models.BooleanField(default=False, verbose_name='Occupied')),
            ],
            options={
                'verbose_name': 'Dining Table',
                'verbose_name_plural': 'Dining Tables',
                'db_table': 'dining_tables',
                'ordering': ['table_number'],
            },
        ),
    ]
