from draftpress.models.project import Project
from draftpress.models.project_version import ProjectVersion
from draftpress.models.project_file import ProjectFile

__all__ = ["Project", "ProjectVersion", "ProjectFile"]
