"""
Database views backing the summary endpoints.

The views live in the database, not in the ORM, so they must be provisioned
separately: by the 0002 migration or by ``python -m app.scripts.create_db_objects``.
Only the string aggregation differs between dialects.
"""

from typing import List

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

DOCTOR_EPISODE_SUMMARY_VIEW = "doctor_episode_summary"
ENEMY_APPEARANCE_SUMMARY_VIEW = "enemy_appearance_summary"

VIEW_NAMES = (DOCTOR_EPISODE_SUMMARY_VIEW, ENEMY_APPEARANCE_SUMMARY_VIEW)

# Episodes counted for a doctor: own first/last plus every companion start/end
DOCTOR_EPISODE_SUMMARY_SQL = f"""
CREATE VIEW {DOCTOR_EPISODE_SUMMARY_VIEW} AS
SELECT
    d.doctor_id,
    d.incarnation_number,
    a.name AS actor_name,
    d.catchphrase,
    COUNT(DISTINCT e.episode_id) AS total_episodes,
    COUNT(DISTINCT dc.companion_id) AS total_companions,
    COUNT(DISTINCT ee.enemy_id) AS total_enemies,
    MIN(e.air_date) AS first_episode_date,
    MAX(e.air_date) AS last_episode_date
FROM doctors d
LEFT JOIN actors a ON a.actor_id = d.actor_id
LEFT JOIN (
    SELECT doctor_id, first_episode_id AS episode_id
    FROM doctors WHERE first_episode_id IS NOT NULL
    UNION
    SELECT doctor_id, last_episode_id
    FROM doctors WHERE last_episode_id IS NOT NULL
    UNION
    SELECT doctor_id, start_episode_id
    FROM doctor_companions WHERE start_episode_id IS NOT NULL
    UNION
    SELECT doctor_id, end_episode_id
    FROM doctor_companions WHERE end_episode_id IS NOT NULL
) de ON de.doctor_id = d.doctor_id
LEFT JOIN episodes e ON e.episode_id = de.episode_id
LEFT JOIN doctor_companions dc ON dc.doctor_id = d.doctor_id
LEFT JOIN enemy_episodes ee ON ee.episode_id = e.episode_id
GROUP BY d.doctor_id, d.incarnation_number, a.name, d.catchphrase
"""

ENEMY_APPEARANCE_SUMMARY_SQL = """
CREATE VIEW {view} AS
SELECT
    en.enemy_id,
    en.name AS enemy_name,
    en.threat_level,
    s.name AS species_name,
    p.name AS home_planet,
    COUNT(DISTINCT ea.episode_id) AS episode_count,
    {titles} AS episodes
FROM enemies en
LEFT JOIN species s ON s.species_id = en.species_id
LEFT JOIN planets p ON p.planet_id = en.home_planet_id
LEFT JOIN (
    SELECT ee.enemy_id, ee.episode_id, e.title, e.air_date
    FROM enemy_episodes ee
    INNER JOIN episodes e ON e.episode_id = ee.episode_id
) ea ON ea.enemy_id = en.enemy_id
GROUP BY en.enemy_id, en.name, en.threat_level, s.name, p.name
"""

SQLITE_ORDERED_TITLES = """(
        SELECT DISTINCT GROUP_CONCAT(e2.title, ', ') OVER (
            ORDER BY e2.air_date, e2.episode_id
            ROWS BETWEEN UNBOUNDED PRECEDING AND UNBOUNDED FOLLOWING
        )
        FROM enemy_episodes ee2
        INNER JOIN episodes e2 ON e2.episode_id = ee2.episode_id
        WHERE ee2.enemy_id = en.enemy_id
    )"""

# Titles joined with ", " in air-date order
TITLE_AGGREGATES = {
    "postgresql": "STRING_AGG(ea.title, ', ' ORDER BY ea.air_date, ea.episode_id)",
    # Plain GROUP_CONCAT has no defined order; the window frame feeds titles
    # in air-date order and needs only SQLite 3.25
    "sqlite": SQLITE_ORDERED_TITLES,
}


def create_view_statements(dialect_name: str) -> List[str]:
    """Return DROP/CREATE statements for every view, for the given dialect."""
    if dialect_name not in TITLE_AGGREGATES:
        raise ValueError(f"Unsupported database dialect for views: {dialect_name}")

    enemy_view = ENEMY_APPEARANCE_SUMMARY_SQL.format(
        view=ENEMY_APPEARANCE_SUMMARY_VIEW, titles=TITLE_AGGREGATES[dialect_name]
    )
    return drop_view_statements() + [
        DOCTOR_EPISODE_SUMMARY_SQL.strip(),
        enemy_view.strip(),
    ]


def drop_view_statements() -> List[str]:
    return [f"DROP VIEW IF EXISTS {name}" for name in VIEW_NAMES]


async def provision_views(conn: AsyncConnection) -> List[str]:
    """(Re)create the summary views on an open connection; returns their names."""
    for statement in create_view_statements(conn.dialect.name):
        await conn.execute(text(statement))
    return list(VIEW_NAMES)


async def drop_views(conn: AsyncConnection) -> None:
    for statement in drop_view_statements():
        await conn.execute(text(statement))
