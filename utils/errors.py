class SceneEditorError(Exception):
    """Base class for errors raised by the scene editor."""


class ProjectNotFoundError(SceneEditorError, LookupError):
    """Raised when a project id is not present in storage."""

    def __init__(self, project_id):
        super().__init__(f"Project '{project_id}' not found")
        self.project_id = project_id


class ProjectStorageError(SceneEditorError):
    """Raised when the underlying project storage cannot be read or written."""


class ProjectDecodeError(ProjectStorageError):
    """Raised when stored project data is malformed."""
