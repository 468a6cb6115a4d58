from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RosterDay',
            fields=[
                ('roster_date', models.DateField(primary_key=True, serialize=False)),
            ],
            options={
                'db_table': 'staff_roster_days',
                'ordering': ['-roster_date'],
            },
        ),
    ]
