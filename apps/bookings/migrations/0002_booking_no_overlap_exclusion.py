"""Database-level guard against overlapping active stays.

PostgreSQL only: an exclusion constraint over the closed range
[check_in, check_out] per property, ignoring cancelled bookings. Other
backends rely on the application-level locks.
"""

from django.db import migrations

CONSTRAINT_NAME = "booking_no_overlapping_active_stays"

CREATE_SQL = [
    "CREATE EXTENSION IF NOT EXISTS btree_gist;",
    f"""
    ALTER TABLE bookings_booking
    ADD CONSTRAINT {CONSTRAINT_NAME}
    EXCLUDE USING gist (
        property_id WITH =,
        tstzrange(check_in, check_out, '[]') WITH &&
    )
    WHERE (status <> 'cancelled');
    """,
]

DROP_SQL = [
    f"ALTER TABLE bookings_booking DROP CONSTRAINT IF EXISTS {CONSTRAINT_NAME};",
]


def _run_on_postgresql(statements):
    def run(apps, schema_editor):
        if schema_editor.connection.vendor != "postgresql":
            return
        for statement in statements:
            schema_editor.execute(statement)

    return run


class Migration(migrations.Migration):

    dependencies = [
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(
            _run_on_postgresql(CREATE_SQL),
            reverse_code=_run_on_postgresql(DROP_SQL),
        ),
    ]
