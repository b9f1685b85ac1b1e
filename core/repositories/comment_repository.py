"""Comment repository."""

from core.models import Comment

from .base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    model = Comment

    def filter_by(self, type: str, link: int) -> tuple[list[Comment], int]:
        """All comments attached to one object, oldest first. Returns (comments, count)."""
        comments = (
            self.session.query(Comment)
            .filter(Comment.type == type, Comment.link == link)
            .order_by(Comment.created, Comment.id)
            .all()
        )
        return comments, len(comments)
