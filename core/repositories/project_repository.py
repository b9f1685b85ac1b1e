"""Project repository."""

from core.models import Project, ProjectMember

from .base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    def is_member(self, project_id: int, user_id: int) -> bool:
        """True when the user owns the project or is listed as a member."""
        project = self.get_by_id(project_id)
        if project is None:
            return False
        if project.owner_id == user_id:
            return True
        return (
            self.session.query(ProjectMember.id)
            .filter(ProjectMember.project_id == project_id, ProjectMember.user_id == user_id)
            .first()
            is not None
        )
