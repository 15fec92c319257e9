from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Suggestion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "type",
                    models.CharField(choices=[("SYMPTOM", "Symptom"), ("MEDICINE", "Medicine")], max_length=16),
                ),
                ("text", models.CharField(max_length=255)),
                ("count", models.PositiveIntegerField(default=1)),
            ],
            options={
                "db_table": "suggestions_suggestion",
                "indexes": [models.Index(fields=["type", "-count", "text"], name="suggestion_rank_idx")],
            },
        ),
        migrations.AddConstraint(
            model_name="suggestion",
            constraint=models.UniqueConstraint(fields=("type", "text"), name="uq_suggestion_type_text"),
        ),
    ]
