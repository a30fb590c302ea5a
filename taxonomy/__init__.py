"""
taxonomy — 종목·리그·팀 분류 체계

    slug       자유 텍스트 → slug (SlugCodec, slugify_text)
    allocator  유일 slug 할당 (allocate)
    season     경기일·시즌 계산 (match_day, season_for)
    store      SQLAlchemy 저장소 (TaxonomyStore)
    resolver   find-or-create (TaxonomyResolver, ResolvedTaxonomy)
"""

from taxonomy.allocator import allocate
from taxonomy.errors import SlugAllocationError, TaxonomyConflictError, TaxonomyError
from taxonomy.resolver import ResolvedTaxonomy, TaxonomyResolver
from taxonomy.season import match_day, season_for
from taxonomy.slug import SlugCodec, slugify_text
from taxonomy.store import TaxonomyStore
from taxonomy.tables import TaxonomyTables

__all__ = [
    "allocate",
    "match_day",
    "season_for",
    "slugify_text",
    "ResolvedTaxonomy",
    "SlugAllocationError",
    "SlugCodec",
    "TaxonomyConflictError",
    "TaxonomyError",
    "TaxonomyResolver",
    "TaxonomyStore",
    "TaxonomyTables",
]
