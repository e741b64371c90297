from __future__ import annotations

SCHEMA_STATEMENTS = [
    "CREATE CONSTRAINT entity_id_unique IF NOT EXISTS FOR (e:Entity) REQUIRE e.entity_id IS UNIQUE",
    "CREATE INDEX entity_internal_owner_idx IF NOT EXISTS FOR (e:Entity) ON (e.is_internal_owner)",
    "CREATE INDEX entity_type_idx IF NOT EXISTS FOR (e:Entity) ON (e.type)",
    "CREATE INDEX relation_kind_idx IF NOT EXISTS FOR ()-[r:RELATES_TO]-() ON (r.kind)",
]
