"""Integration tests for categories and tags."""

import uuid

from sqlalchemy import func, select

from artibrain.kernel.errors import CONFLICT, FORBIDDEN, INVALID_REQUEST, NOT_FOUND
from artibrain.kernel.models.taxonomy import post_categories
from artibrain.schemas.post import PostCreate
from artibrain.schemas.taxonomy import TaxonomyCreate, TaxonomyUpdate
from artibrain.services.posts import PostService
from artibrain.services.taxonomy import TaxonomyService


class TestTaxonomyMutations:
    async def test_editor_creates_category(self, db_session, editor, principal_for):
        entry = await TaxonomyService.categories(db_session).create(
            principal_for(editor), TaxonomyCreate(name="Machine Learning")
        )
        
        assert entry.slug == "machine-learning"
        assert entry.name == "Machine Learning"
    
    async def test_explicit_slug_is_normalized(self, db_session, admin, principal_for):
        entry = await TaxonomyService.tags(db_session).create(
            principal_for(admin), TaxonomyCreate(name="NLP", slug="Natural Language")
        )
        
        assert entry.slug == "natural-language"
    
    async def test_author_cannot_create(self, db_session, author, principal_for):
        result = await TaxonomyService.tags(db_session).create(principal_for(author), TaxonomyCreate(name="Python"))
        
        assert result is FORBIDDEN
    
    async def test_duplicate_slug_conflicts(self, db_session, editor, principal_for):
        service = TaxonomyService.tags(db_session)
        await service.create(principal_for(editor), TaxonomyCreate(name="Python"))
        
        assert await service.create(principal_for(editor), TaxonomyCreate(name="python")) is CONFLICT
    
    async def test_same_slug_in_other_kind_is_fine(self, db_session, editor, principal_for):
        await TaxonomyService.tags(db_session).create(principal_for(editor), TaxonomyCreate(name="News"))
        entry = await TaxonomyService.categories(db_session).create(principal_for(editor), TaxonomyCreate(name="News"))
        
        assert entry.slug == "news"
    
    async def test_unsluggable_name_is_invalid(self, db_session, editor, principal_for):
        result = await TaxonomyService.tags(db_session).create(principal_for(editor), TaxonomyCreate(name="!!!"))
        
        assert result is INVALID_REQUEST
    
    async def test_rename_reslugs(self, db_session, editor, principal_for):
        service = TaxonomyService.categories(db_session)
        entry = await service.create(principal_for(editor), TaxonomyCreate(name="Tutorials"))
        
        renamed = await service.update(principal_for(editor), entry.id, TaxonomyUpdate(name="How-To Guides"))
        
        assert renamed.name == "How-To Guides"
        assert renamed.slug == "how-to-guides"
    
    async def test_rename_onto_existing_slug_conflicts(self, db_session, editor, principal_for):
        service = TaxonomyService.categories(db_session)
        await service.create(principal_for(editor), TaxonomyCreate(name="News"))
        entry = await service.create(principal_for(editor), TaxonomyCreate(name="Tutorials"))
        
        assert await service.update(principal_for(editor), entry.id, TaxonomyUpdate(name="News")) is CONFLICT
    
    async def test_update_unknown(self, db_session, editor, principal_for):
        result = await TaxonomyService.tags(db_session).update(principal_for(editor), uuid.uuid4(), TaxonomyUpdate(name="x"))
        
        assert result is NOT_FOUND
    
    async def test_delete_detaches_posts(self, db_session, editor, principal_for):
        who = principal_for(editor)
        service = TaxonomyService.categories(db_session)
        entry = await service.create(who, TaxonomyCreate(name="News"))
        post = await PostService(db_session).create(
            who, PostCreate(title="Breaking", content={}, status="PUBLISHED", category_ids=[entry.id])
        )
        
        assert await service.delete(who, entry.id) is None
        
        links = await db_session.execute(select(func.count()).select_from(post_categories))
        assert links.scalar() == 0
        assert await service.get_by_slug("news") is NOT_FOUND
        assert (await PostService(db_session).get_public_by_slug(post.slug)).id == post.id
    
    async def test_author_cannot_delete(self, db_session, editor, author, principal_for):
        service = TaxonomyService.tags(db_session)
        entry = await service.create(principal_for(editor), TaxonomyCreate(name="Python"))
        
        assert await service.delete(principal_for(author), entry.id) is FORBIDDEN


class TestTaxonomyReads:
    async def test_counts_only_visible_posts(self, db_session, editor, principal_for):
        who = principal_for(editor)
        categories = TaxonomyService.categories(db_session)
        ml = await categories.create(who, TaxonomyCreate(name="Machine Learning"))
        await categories.create(who, TaxonomyCreate(name="Empty"))
        posts = PostService(db_session)
        await posts.create(who, PostCreate(title="Live", content={}, status="PUBLISHED", category_ids=[ml.id]))
        await posts.create(who, PostCreate(title="Draft", content={}, category_ids=[ml.id]))
        
        listing = await categories.list_with_counts()
        
        assert [(entry.slug, count) for entry, count in listing] == [("empty", 0), ("machine-learning", 1)]
        entry, count = await categories.get_by_slug("machine-learning")
        assert entry.id == ml.id
        assert count == 1
    
    async def test_unknown_slug(self, db_session):
        assert await TaxonomyService.tags(db_session).get_by_slug("nope") is NOT_FOUND
