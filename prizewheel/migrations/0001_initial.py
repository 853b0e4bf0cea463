import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Prize",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("value", models.CharField(max_length=64, unique=True)),
                ("name", models.CharField(max_length=255)),
                (
                    "stock",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Remaining units for physical gifts. Empty means unlimited.",
                        null=True,
                    ),
                ),
            ],
            options={
                "db_table": "prizes",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Spin",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("user_id", models.CharField(max_length=255)),
                ("prize_value", models.CharField(max_length=64)),
                (
                    "spun_at",
                    models.DateTimeField(
                        db_index=True, default=django.utils.timezone.now
                    ),
                ),
            ],
            options={
                "db_table": "spins",
                "ordering": ["-spun_at"],
                "indexes": [
                    models.Index(
                        fields=["user_id", "-spun_at"],
                        name="spins_user_spun_idx",
                    )
                ],
            },
        ),
    ]
