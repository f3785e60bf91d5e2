import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("description", models.CharField(max_length=50)),
                ("date", models.DateField(db_index=True)),
                ("amount_minor_units", models.BigIntegerField(help_text="Purchase amount in cents of the base currency.")),
            ],
            options={
                "db_table": "purchase",
                "ordering": ["-date", "-created_at"],
            },
        ),
    ]
