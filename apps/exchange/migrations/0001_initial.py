import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="CurrencyExchangeRate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("from_currency", models.CharField(db_index=True, max_length=3)),
                ("to_currency", models.CharField(db_index=True, max_length=3)),
                ("rate", models.DecimalField(decimal_places=6, max_digits=18)),
                ("effective_date", models.DateField(db_index=True)),
                ("record_date", models.DateField()),
            ],
            options={
                "db_table": "exchange_rate",
                "ordering": ["-effective_date", "-record_date", "-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("from_currency", "to_currency", "effective_date"),
                        name="unique_rate_per_effective_date",
                    )
                ],
            },
        ),
    ]
