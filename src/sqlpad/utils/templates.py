"""Built-in SQL templates offered by the console."""

from __future__ import annotations

from typing import NamedTuple


class SqlTemplate(NamedTuple):
    name: str
    label: str
    sql: str


QUERY_DATABASES = SqlTemplate(
    name="databases",
    label="Query databases",
    sql="SHOW DATABASES;",
)

QUERY_TABLES = SqlTemplate(
    name="tables",
    label="Query tables",
    sql="""## query tables of db
SET @db = 'information_schema';
SELECT
  `TABLE_NAME` AS `Table`,
  `ENGINE` AS `Engine`,
  `TABLE_COLLATION` AS `Collation`
FROM `information_schema`.`TABLES`
WHERE `TABLE_SCHEMA` = @db;""",
)

QUERY_COLUMNS = SqlTemplate(
    name="columns",
    label="Query columns",
    sql="""## query columns of db.table
SET @db = 'information_schema';
SET @table = 'COLUMNS';
SELECT
  `COLUMN_NAME` AS `Column`,
  `COLUMN_TYPE` AS `Type`,
  `COLLATION_NAME` AS `Collation`
FROM `information_schema`.`COLUMNS`
WHERE `TABLE_SCHEMA` = @db AND `TABLE_NAME` = @table;""",
)

QUERY_INDEXES = SqlTemplate(
    name="indexes",
    label="Query indexes",
    sql="""## query indexes of db.table
SET @db = 'information_schema';
SET @table = 'COLUMNS';
SELECT
  `INDEX_NAME` AS `Index`,
  `COLUMN_NAME` AS `Column`,
  IF(`NON_UNIQUE`=1, 0, 1) AS `Unique`
FROM `information_schema`.`STATISTICS`
WHERE `TABLE_SCHEMA` = @db AND `TABLE_NAME` = @table;""",
)

TEMPLATES: dict[str, SqlTemplate] = {
    template.name: template
    for template in (QUERY_DATABASES, QUERY_TABLES, QUERY_COLUMNS, QUERY_INDEXES)
}


def get_template(name: str) -> SqlTemplate:
    """Look up a template by name (case-insensitive).

    Raises:
        ValueError: If no template has that name
    """
    key = name.strip().lower()
    if key not in TEMPLATES:
        available = ", ".join(sorted(TEMPLATES))
        raise ValueError(f"Unknown template '{name}'. Available templates: {available}")
    return TEMPLATES[key]
