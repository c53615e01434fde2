"""Integration tests for user administration and author pages."""

import uuid

from artibrain.kernel.errors import CONFLICT, FORBIDDEN, NOT_FOUND
from artibrain.kernel.identity.identity_service import IdentityService
from artibrain.kernel.models.user import UserRole
from artibrain.schemas.post import PostCreate
from artibrain.schemas.user import UserCreate, UserUpdate
from artibrain.services.posts import PostService
from artibrain.services.users import UserService


def _new_user(**kwargs) -> UserCreate:
    fields = {"name": "Nina New", "email": "nina@example.com", "password": "LongEnough123"}
    fields.update(kwargs)
    return UserCreate(**fields)


class TestUserAdministration:
    async def test_admin_creates_user_who_can_log_in(self, db_session, admin, principal_for):
        user = await UserService(db_session).create(principal_for(admin), _new_user(email="Nina@Example.com"))
        
        assert user.email == "nina@example.com"
        assert user.role_value == UserRole.AUTHOR.value
        assert user.password_hash != "LongEnough123"
        principal = await IdentityService(db_session).authenticate("nina@example.com", "LongEnough123")
        assert principal.id == user.id
    
    async def test_duplicate_email_conflicts(self, db_session, admin, principal_for):
        service = UserService(db_session)
        await service.create(principal_for(admin), _new_user())
        
        assert await service.create(principal_for(admin), _new_user(name="Other")) is CONFLICT
    
    async def test_only_admin_manages_users(self, db_session, editor, author, reader, principal_for):
        service = UserService(db_session)
        
        for user in (editor, author, reader):
            who = principal_for(user)
            assert await service.create(who, _new_user()) is FORBIDDEN
            assert await service.list_users(who) is FORBIDDEN
            assert await service.get_user(who, user.id) is FORBIDDEN
            assert await service.update(who, user.id, UserUpdate(name="x")) is FORBIDDEN
            assert await service.delete(who, user.id) is FORBIDDEN
    
    async def test_list_and_get(self, db_session, admin, author, principal_for):
        service = UserService(db_session)
        
        users = await service.list_users(principal_for(admin))
        
        assert {u.id for u in users} == {admin.id, author.id}
        assert (await service.get_user(principal_for(admin), author.id)).email == author.email
        assert await service.get_user(principal_for(admin), uuid.uuid4()) is NOT_FOUND
    
    async def test_update_role_and_password(self, db_session, admin, author, principal_for):
        service = UserService(db_session)
        
        updated = await service.update(
            principal_for(admin),
            author.id,
            UserUpdate(role=UserRole.EDITOR, password="BrandNewPass1"),
        )
        
        assert updated.role_value == UserRole.EDITOR.value
        principal = await IdentityService(db_session).authenticate(author.email, "BrandNewPass1")
        assert principal.role == UserRole.EDITOR
    
    async def test_update_email_collision(self, db_session, admin, author, principal_for):
        result = await UserService(db_session).update(principal_for(admin), author.id, UserUpdate(email=admin.email))
        
        assert result is CONFLICT
    
    async def test_delete_user_without_posts(self, db_session, admin, reader, principal_for):
        service = UserService(db_session)
        
        assert await service.delete(principal_for(admin), reader.id) is None
        assert await service.get_user(principal_for(admin), reader.id) is NOT_FOUND
    
    async def test_delete_author_with_posts_conflicts(self, db_session, admin, author, principal_for):
        await PostService(db_session).create(principal_for(author), PostCreate(title="Mine", content={}))
        
        assert await UserService(db_session).delete(principal_for(admin), author.id) is CONFLICT
    
    async def test_delete_unknown(self, db_session, admin, principal_for):
        assert await UserService(db_session).delete(principal_for(admin), uuid.uuid4()) is NOT_FOUND


class TestAuthorProfile:
    async def test_profile_lists_visible_posts_only(self, db_session, author, principal_for):
        posts = PostService(db_session)
        who = principal_for(author)
        await posts.create(who, PostCreate(title="Public Piece", content={}, status="PUBLISHED"))
        await posts.create(who, PostCreate(title="Private Draft", content={}))
        
        user, visible = await UserService(db_session).get_author_profile(author.id)
        
        assert user.id == author.id
        assert [p.slug for p in visible] == ["public-piece"]
    
    async def test_author_without_posts(self, db_session, reader):
        user, visible = await UserService(db_session).get_author_profile(reader.id)
        
        assert user.id == reader.id
        assert visible == []
    
    async def test_unknown_author(self, db_session):
        assert await UserService(db_session).get_author_profile(uuid.uuid4()) is NOT_FOUND
