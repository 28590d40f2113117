"""
KBlog Backend — Settings and Entity Schema Tests
=================================================

What we test:
    ✅ Settings validators (storage backend, not-found status, log level)
    ✅ Entities: camelCase aliases, frozen, JSON timestamp round trip
"""

from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from kblog.config import Settings
from kblog.schemas.blog import Comment, Post


class TestSettings:

    def test_defaults(self):
        settings = Settings()

        assert settings.storage_backend == "memory"
        assert settings.not_found_status == 500

    def test_backend_normalized(self):
        assert Settings(storage_backend="SQL").storage_backend == "sql"

    def test_invalid_backend(self):
        with pytest.raises(PydanticValidationError):
            Settings(storage_backend="redis")

    def test_invalid_not_found_status(self):
        with pytest.raises(PydanticValidationError):
            Settings(not_found_status=418)

    def test_log_level_upper(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("NOT_FOUND_STATUS", "404")

        assert Settings().not_found_status == 404

    def test_cors_origins_list(self):
        settings = Settings(cors_origins="http://a.test, http://b.test")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


class TestEntities:

    def test_comment_json_uses_aliases(self):
        comment = Comment(post_id=1, author="testu", content="hi", created_at=datetime(2017, 12, 16))

        data = comment.model_dump(by_alias=True)

        assert data["postId"] == 1
        assert "createdAt" in data

    def test_post_json_round_trip(self):
        post = Post(id=3, title="t", content="c", created_at=datetime(2017, 12, 16, 10, 30, 15, 5))

        assert Post.model_validate_json(post.model_dump_json(by_alias=True)) == post

    def test_entities_are_frozen(self):
        comment = Comment(post_id=1, author="a", content="c", created_at=datetime(2017, 12, 16))

        with pytest.raises(PydanticValidationError):
            comment.post_id = 2

    def test_content_required(self):
        with pytest.raises(PydanticValidationError):
            Post(title="t", created_at=datetime(2017, 12, 16))
